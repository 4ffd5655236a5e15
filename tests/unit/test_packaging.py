"""
Unit tests for artifact file naming and ZIP packaging.
"""

import io
import zipfile

from vibeocm.services.packaging import (
    artifact_file_name,
    build_zip,
    error_file_name,
    error_placeholder,
    zip_file_name,
)


def test_artifact_file_name() -> None:
    assert artifact_file_name("Organizational Change Plan") == "organizational-change-plan.md"
    assert artifact_file_name("Communication  Message\tTemplates") == "communication-message-templates.md"


def test_error_file_name() -> None:
    assert error_file_name("Communication Plan") == "communication-plan-ERROR.md"


def test_zip_file_name() -> None:
    assert zip_file_name("CRM Migration") == "crm-migration-ocm-artifacts.zip"
    assert zip_file_name("") == "project-ocm-artifacts.zip"


def test_error_placeholder() -> None:
    assert error_placeholder("Communication Plan") == (
        "Failed to generate Communication Plan. Please try generating this artifact individually."
    )


def test_build_zip_contents() -> None:
    data = build_zip([("a.md", "# A"), ("b-ERROR.md", "Failed")])

    with zipfile.ZipFile(io.BytesIO(data)) as archive:
        assert archive.namelist() == ["a.md", "b-ERROR.md"]
        assert archive.read("a.md").decode() == "# A"
        assert archive.getinfo("a.md").compress_type == zipfile.ZIP_DEFLATED
