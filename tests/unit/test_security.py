"""
Unit tests for passphrase hashing and key masking.
"""

from vibeocm.core.security import (
    generate_session_id,
    hash_passphrase,
    mask_api_key,
    validate_passphrase,
    verify_passphrase,
)


def test_hash_round_trip() -> None:
    hashed = hash_passphrase("correct horse battery", iterations=1_000)
    assert hashed.startswith("pbkdf2_sha256$1000$")
    assert verify_passphrase("correct horse battery", hashed)
    assert not verify_passphrase("wrong horse battery", hashed)


def test_passphrase_is_trimmed() -> None:
    hashed = hash_passphrase("  correct horse battery  ", iterations=1_000)
    assert verify_passphrase("correct horse battery", hashed)
    assert verify_passphrase("correct horse battery\n", hashed)


def test_salts_differ() -> None:
    assert hash_passphrase("same phrase here", iterations=1_000) != hash_passphrase("same phrase here", iterations=1_000)


def test_malformed_hash_is_rejected() -> None:
    assert not verify_passphrase("anything", "not-a-hash")
    assert not verify_passphrase("anything", "bcrypt$10$abcd$ef01")
    assert not verify_passphrase("anything", "pbkdf2_sha256$x$zz$00")


def test_validate_without_configured_hash() -> None:
    assert validate_passphrase("correct horse battery", stored_hash="") is False


def test_validate_with_stored_hash() -> None:
    hashed = hash_passphrase("correct horse battery", iterations=1_000)
    assert validate_passphrase("correct horse battery", stored_hash=hashed) is True


def test_session_id_format() -> None:
    session_id = generate_session_id()
    assert session_id.startswith("sess_")
    assert len(session_id) == len("sess_") + 32


def test_mask_api_key() -> None:
    assert mask_api_key("sk-abcdefghijklmnopwxyz") == "sk-…wxyz"
    assert mask_api_key("mistralkey1234") == "…1234"
    assert mask_api_key("short") == "…"
    assert mask_api_key("") is None
