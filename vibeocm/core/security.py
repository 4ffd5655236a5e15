"""
Authentication and security utilities.
"""

import hashlib
import hmac
import secrets
from typing import Optional

from vibeocm.core.config import settings
from vibeocm.core.logging import get_logger

logger = get_logger(__name__)

PASSPHRASE_HASH_ALGORITHM = "pbkdf2_sha256"
PASSPHRASE_HASH_ITERATIONS = 600_000


def generate_session_id() -> str:
    """
    Generate a unique session ID.

    Returns:
        A random 16-byte hex string prefixed with 'sess_'
    """
    return f"sess_{secrets.token_hex(16)}"


def hash_passphrase(
    passphrase: str,
    salt: Optional[bytes] = None,
    iterations: int = PASSPHRASE_HASH_ITERATIONS,
) -> str:
    """
    Hash a passphrase for storage in HASHED_PASSPHRASE.

    The passphrase is trimmed first, matching what verification does.

    Args:
        passphrase: Plain text passphrase
        salt: Optional salt (random 16 bytes by default)
        iterations: PBKDF2 iteration count

    Returns:
        String of the form pbkdf2_sha256$<iterations>$<salt hex>$<hash hex>
    """
    salt = salt or secrets.token_bytes(16)
    digest = hashlib.pbkdf2_hmac(
        "sha256", passphrase.strip().encode("utf-8"), salt, iterations
    )
    return f"{PASSPHRASE_HASH_ALGORITHM}${iterations}${salt.hex()}${digest.hex()}"


def verify_passphrase(passphrase: str, stored_hash: str) -> bool:
    """
    Verify a passphrase against a stored hash.

    Args:
        passphrase: The passphrase provided by the user
        stored_hash: Value produced by hash_passphrase

    Returns:
        True if the passphrase matches, False otherwise (including malformed hashes)
    """
    try:
        algorithm, iterations, salt_hex, hash_hex = stored_hash.strip().split("$")
        if algorithm != PASSPHRASE_HASH_ALGORITHM:
            return False
        salt = bytes.fromhex(salt_hex)
        rounds = int(iterations)
    except ValueError:
        logger.error("Stored passphrase hash is malformed")
        return False

    candidate = hashlib.pbkdf2_hmac(
        "sha256", passphrase.strip().encode("utf-8"), salt, rounds
    )
    return hmac.compare_digest(candidate.hex(), hash_hex)


def validate_passphrase(passphrase: str, stored_hash: Optional[str] = None) -> bool:
    """
    Validate a passphrase against the configured HASHED_PASSPHRASE.

    Args:
        passphrase: The plain text passphrase to validate
        stored_hash: Override for the configured hash

    Returns:
        Whether the passphrase is valid. False when no hash is configured.
    """
    hashed = stored_hash if stored_hash is not None else settings.security.hashed_passphrase
    if not hashed:
        logger.error("No hashed passphrase configured in environment variables")
        return False

    is_valid = verify_passphrase(passphrase, hashed)
    logger.info("Passphrase validation", result="succeeded" if is_valid else "failed")
    return is_valid


def mask_api_key(api_key: Optional[str]) -> Optional[str]:
    """
    Mask an API key for display.

    Returns:
        e.g. 'sk-…wxyz', '…wxyz' for keys without a dash prefix, or None if empty
    """
    if not api_key:
        return None
    tail = api_key[-4:] if len(api_key) > 8 else ""
    if api_key.startswith("sk-"):
        return f"sk-…{tail}"
    return f"…{tail}"
