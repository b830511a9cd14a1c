"""Exceptions raised by the issue assembly pipeline."""


class ArchiverError(Exception):
    """Base exception for all assembly pipeline errors."""

    def __init__(self, message: str, *args, **kwargs):
        self.message = message
        super().__init__(message, *args, **kwargs)


class CaptureError(ArchiverError):
    """Raised when a single content unit cannot be captured."""

    def __init__(self, message: str, url: str, *args, **kwargs):
        self.url = url
        super().__init__(message, *args, **kwargs)


class MergeInconsistencyError(ArchiverError):
    """Raised when the merged PDF page count disagrees with the captures."""

    def __init__(self, message: str, expected: int | None = None, actual: int | None = None):
        self.expected = expected
        self.actual = actual
        super().__init__(message)


class ImageConversionError(ArchiverError):
    """Raised when requested page rasterization fails."""

    pass


class ALTOGenerationError(ArchiverError):
    """Raised when an ALTO document cannot be generated."""

    def __init__(self, message: str, page_number: int | None = None):
        self.page_number = page_number
        super().__init__(message)


class METSGenerationError(ArchiverError):
    """Raised when the METS document cannot be generated."""

    pass


class PackageWriteError(ArchiverError):
    """Raised when an archive package cannot be written."""

    pass
