"""Upload validation utilities."""
from studybase.exceptions import FileSizeExceededError, FileTypeNotSupportedError


class PDFValidator:
    """Validator for uploaded PDF files."""

    SUPPORTED_EXTENSIONS = [".pdf"]
    PDF_MAGIC_BYTES = b"%PDF"

    @classmethod
    def validate_file_type(cls, filename: str, content: bytes) -> str:
        """Validate file name and header and return the clean extension."""
        if not filename:
            raise FileTypeNotSupportedError("File name is required.")

        file_extension = filename.lower().rsplit(".", 1)[-1] if "." in filename else ""
        full_extension = f".{file_extension}"

        if full_extension not in cls.SUPPORTED_EXTENSIONS:
            raise FileTypeNotSupportedError(
                f"Unsupported file type. Supported formats: {', '.join(cls.SUPPORTED_EXTENSIONS)}"
            )

        if not content.lstrip()[:10].startswith(cls.PDF_MAGIC_BYTES):
            raise FileTypeNotSupportedError("File must be a PDF.")

        return full_extension

    @classmethod
    def validate_file_size(cls, file_size_bytes: int, max_size_mb: float) -> None:
        """Validate file size."""
        file_size_mb = file_size_bytes / (1024 * 1024)
        if file_size_mb > max_size_mb:
            raise FileSizeExceededError(
                f"File size ({file_size_mb:.2f} MB) exceeds maximum allowed size ({max_size_mb} MB)."
            )
