"""Custom exception classes for the gateway."""


class GatewayException(Exception):
    """
    Base exception class for all gateway errors.
    """
    pass


class ObjectConflictError(GatewayException):
    """
    Raised when an object name already exists or is locked by another
    in-flight operation.
    """
    pass


class ObjectNotFoundError(GatewayException):
    """
    Raised when a requested object is not in the catalog.
    """
    pass


class StorageBackendError(GatewayException):
    """
    Raised when the chunk-transport backend fails an upload, download or
    remove call.
    """
    pass


class ChunkNotFoundError(StorageBackendError):
    """
    Raised by a backend when a chunk reference no longer resolves.
    """
    pass


class UnknownBackendError(GatewayException):
    """
    Raised when the configured storage backend name is not registered.
    """
    pass
