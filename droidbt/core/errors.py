"""Domain-specific errors for droidbt."""


class DroidbtError(Exception):
    """Base error for droidbt."""


class TableValidationError(DroidbtError):
    """Raised when a symbol table file does not conform to schema or semantics."""


class TableLoadError(DroidbtError):
    """Raised when loading symbol table sources fails."""


class DocumentError(DroidbtError):
    """Base document reader error."""


class DocumentOpenError(DocumentError):
    """Raised when the configuration document cannot be opened at all."""


class DocumentParseError(DocumentError):
    """Raised when the node stream breaks off mid-document."""
