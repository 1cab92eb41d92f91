"""Validation utilities for uploaded statements and output paths."""

import os
import re
from typing import List, Optional

from statement_converter.config.settings import (
    MAX_FILE_SIZE_MB,
    SUPPORTED_MIME_TYPES,
    SUPPORTED_PDF_FORMATS,
)


MAX_FILENAME_LENGTH = 255

SUSPICIOUS_EXTENSIONS_RX = re.compile(
    r"\.(?:exe|bat|cmd|scr|pif|com|vbs|js|jar|app)$", re.IGNORECASE
)
DANGEROUS_FILENAME_CHARS_RX = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


class ValidationError(Exception):
    """Validation failure carrying a machine-readable code."""

    def __init__(self, message: str, code: str = "VALIDATION_ERROR", error: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.error = error or message


def validate_uploaded_file(
    filename: Optional[str],
    size: Optional[int],
    mimetype: Optional[str],
    max_size_mb: int = MAX_FILE_SIZE_MB,
    supported_mime_types: List[str] = SUPPORTED_MIME_TYPES
) -> None:
    """Validate an uploaded statement before any extraction is attempted.

    Checks run in a fixed order and the first failure wins.

    Args:
        filename: Original filename supplied by the client.
        size: Upload size in bytes, or None when no file was sent.
        mimetype: Declared content type of the upload.
        max_size_mb: Maximum allowed upload size in MB.
        supported_mime_types: Accepted content types.

    Raises:
        ValidationError: With one of the codes ``NO_FILE``, ``INVALID_TYPE``,
            ``FILE_TOO_LARGE``, ``EMPTY_FILE``, ``INVALID_FILENAME``,
            ``SUSPICIOUS_FILE``, ``FILENAME_TOO_LONG`` or
            ``INVALID_CHARACTERS``.
    """
    if size is None:
        raise ValidationError("Please select a file to upload", "NO_FILE", "No file provided")

    if mimetype not in supported_mime_types:
        raise ValidationError("Only PDF files are allowed", "INVALID_TYPE", "Invalid file type")

    max_size = max_size_mb * 1024 * 1024
    if size > max_size:
        size_mb = size / (1024 * 1024)
        raise ValidationError(
            f"File size ({size_mb:.1f}MB) exceeds the {max_size_mb}MB limit",
            "FILE_TOO_LARGE",
            "File too large",
        )

    if size == 0:
        raise ValidationError("The uploaded file is empty", "EMPTY_FILE", "Empty file")

    if not filename or not filename.strip():
        raise ValidationError("File has no name", "INVALID_FILENAME", "Invalid filename")

    if SUSPICIOUS_EXTENSIONS_RX.search(filename):
        raise ValidationError(
            "File type not allowed for security reasons",
            "SUSPICIOUS_FILE",
            "Suspicious file type",
        )

    if len(filename) > MAX_FILENAME_LENGTH:
        raise ValidationError(
            f"File name is too long (max {MAX_FILENAME_LENGTH} characters)",
            "FILENAME_TOO_LONG",
            "Filename too long",
        )

    if DANGEROUS_FILENAME_CHARS_RX.search(filename):
        raise ValidationError(
            "File name contains invalid characters",
            "INVALID_CHARACTERS",
            "Invalid characters in filename",
        )


def validate_file_path(file_path: str) -> None:
    """Validate that a file path exists and is accessible.

    Args:
        file_path: Path to the file to validate.

    Raises:
        ValidationError: If file path is invalid.
    """
    if not file_path:
        raise ValidationError("File path cannot be empty", "NO_FILE")

    if not os.path.exists(file_path):
        raise ValidationError(f"File does not exist: {file_path}", "NO_FILE")

    if not os.path.isfile(file_path):
        raise ValidationError(f"Path is not a file: {file_path}", "NO_FILE")

    if not os.access(file_path, os.R_OK):
        raise ValidationError(f"File is not readable: {file_path}", "NO_FILE")


def validate_file_size(file_path: str, max_size_mb: int = MAX_FILE_SIZE_MB) -> None:
    """Validate file size against maximum allowed size.

    Raises:
        ValidationError: If file size exceeds limit or the file is empty.
    """
    file_size_bytes = os.path.getsize(file_path)
    file_size_mb = file_size_bytes / (1024 * 1024)

    if file_size_bytes == 0:
        raise ValidationError(f"File is empty: {file_path}", "EMPTY_FILE")

    if file_size_mb > max_size_mb:
        raise ValidationError(
            f"File size {file_size_mb:.2f}MB exceeds maximum "
            f"allowed size {max_size_mb}MB",
            "FILE_TOO_LARGE",
        )


def validate_file_extension(
    file_path: str,
    supported_formats: List[str] = SUPPORTED_PDF_FORMATS
) -> None:
    """Validate file extension against supported formats.

    Raises:
        ValidationError: If file extension is not supported.
    """
    _, ext = os.path.splitext(file_path.lower())

    if ext not in supported_formats:
        raise ValidationError(
            f"File extension '{ext}' not supported. "
            f"Supported formats: {', '.join(supported_formats)}",
            "INVALID_TYPE",
        )


def validate_pdf_file(file_path: str, max_size_mb: int = MAX_FILE_SIZE_MB) -> None:
    """Perform comprehensive validation of a PDF file on disk.

    Raises:
        ValidationError: If any validation fails.
    """
    validate_file_path(file_path)
    validate_file_extension(file_path)
    validate_file_size(file_path, max_size_mb)


def validate_directory_path(dir_path: str) -> None:
    """Validate that a directory path exists and is writable.

    Missing directories are created.

    Raises:
        ValidationError: If directory path is invalid.
    """
    if not dir_path:
        raise ValidationError("Directory path cannot be empty")

    if not os.path.exists(dir_path):
        try:
            os.makedirs(dir_path, exist_ok=True)
        except OSError as e:
            raise ValidationError(f"Cannot create directory {dir_path}: {str(e)}")

    if not os.path.isdir(dir_path):
        raise ValidationError(f"Path is not a directory: {dir_path}")

    if not os.access(dir_path, os.W_OK):
        raise ValidationError(f"Directory is not writable: {dir_path}")
