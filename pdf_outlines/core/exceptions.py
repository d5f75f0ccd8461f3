"""Core domain exceptions.

All exceptions raised by core logic inherit from CoreError.
Adapters catch provider-specific errors and re-raise as these.
"""


class CoreError(Exception):
    """Base for all core domain errors."""
    pass


class ValidationError(CoreError):
    """Data validation failed."""
    pass


class StorageError(CoreError):
    """Object store operation failed."""
    pass


class PDFError(CoreError):
    """PDF operation failed."""
    pass


class OutlineError(CoreError):
    """Outline tree operation failed."""
    pass


class StructuralIntegrityError(OutlineError):
    """Stored outline relations are inconsistent (dangling reference, cycle, bad endpoint)."""

    def __init__(self, message: str, ref=None):
        super().__init__(message)
        self.ref = ref


class MalformedRecordError(OutlineError):
    """A backing record is missing a required field or holds an invalid value."""

    def __init__(self, message: str, ref=None):
        super().__init__(message)
        self.ref = ref


class StaleReferenceError(OutlineError):
    """An outline item was used after it was erased."""
    pass
