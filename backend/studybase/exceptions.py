"""Custom exception classes for entry ingestion."""


class StudybaseError(Exception):
    """Base exception for entry ingestion errors."""
    pass


class ValidationError(StudybaseError):
    """Raised when an uploaded document fails validation."""
    pass


class FileTypeNotSupportedError(ValidationError):
    """Raised when an unsupported file type is encountered."""
    pass


class FileSizeExceededError(ValidationError):
    """Raised when file size exceeds the maximum allowed."""
    pass


class DocumentEmptyError(ValidationError):
    """Raised when a document has no extractable content."""
    pass


class NoChunksError(ValidationError):
    """Raised when segmentation leaves no chunk worth classifying."""
    pass


class NoEntryTypesError(ValidationError):
    """Raised when a quiz is requested without any entry type."""
    pass


class ProcessingError(StudybaseError):
    """Raised when document processing fails."""
    pass


class ExtractionError(ProcessingError):
    """Raised when text extraction from a document fails."""
    pass


class ClassificationError(StudybaseError):
    """Raised when the classification service call fails."""
    pass


class EntryNotFoundError(StudybaseError):
    """Raised when an entry does not exist for the requesting user."""
    pass


class ServiceUnavailableError(StudybaseError):
    """Raised when required services are not available."""
    pass
