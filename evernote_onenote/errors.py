"""Exception types raised by the importer."""


class EvernoteImportError(Exception):
    """Base class for errors that abort an import run."""


class EnexParseError(EvernoteImportError):
    """Raised when an ENEX document is malformed or lacks a mandatory field."""


class ConfigurationError(EvernoteImportError):
    """Raised when required configuration is missing or malformed."""


class OneNoteError(EvernoteImportError):
    """Raised when a OneNote API call fails."""

    def __init__(self, message: str, status_code: int | None = None, response_text: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text
