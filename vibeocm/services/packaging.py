"""
Markdown file naming and ZIP packaging of generated artifacts.
"""

import io
import re
import zipfile
from typing import Iterable

from vibeocm.core.constants import ARTIFACT_FILE_SUFFIX, ERROR_FILE_SUFFIX, ZIP_FILE_SUFFIX

_WHITESPACE = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Lowercase with whitespace runs replaced by '-'."""
    return _WHITESPACE.sub("-", name.strip().lower())


def artifact_file_name(artifact_type: str) -> str:
    return f"{slugify(artifact_type)}{ARTIFACT_FILE_SUFFIX}"


def error_file_name(artifact_type: str) -> str:
    return f"{slugify(artifact_type)}{ERROR_FILE_SUFFIX}"


def zip_file_name(project_name: str) -> str:
    return f"{slugify(project_name) or 'project'}{ZIP_FILE_SUFFIX}"


def error_placeholder(artifact_type: str) -> str:
    return f"Failed to generate {artifact_type}. Please try generating this artifact individually."


def build_zip(files: Iterable[tuple[str, str]]) -> bytes:
    """
    Build a ZIP archive in memory.

    Args:
        files: (file name, text content) pairs, written in order

    Returns:
        The archive bytes
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, content in files:
            archive.writestr(name, content)
    return buffer.getvalue()
