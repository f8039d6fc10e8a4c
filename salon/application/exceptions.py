
class StorageError(RuntimeError):
    """Raised when a write to or read from the blob store fails."""
    pass


class GenerationError(RuntimeError):
    """Raised when the image generation provider fails or returns a fault."""
    pass


class UnrecognizedProviderOutput(GenerationError):
    """Raised when provider output matches none of the recognized result shapes."""
    pass


class ResultFetchError(RuntimeError):
    """Raised when the provider's result URL cannot be fetched for persisting."""
    pass


class InvalidStageError(RuntimeError):
    """Raised when a pipeline operation is not permitted in the current stage."""
    pass


class RestyleInProgress(InvalidStageError):
    """Raised when a restyle is triggered while another one is still in flight."""
    pass


class SessionNotFound(KeyError):
    pass
