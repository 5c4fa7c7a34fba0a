"""
Defines custom exceptions for the application to allow for more specific error handling.
"""


class ModcatError(Exception):
    """Base exception for all application-specific errors."""


class RemoteNotFound(ModcatError):
    """Raised when a mod or file id does not exist in the remote catalog."""


class RemoteUnavailable(ModcatError):
    """Raised when the catalog cannot be reached or answers with an error status."""


class ParseFailure(RemoteUnavailable):
    """Raised when a catalog response is not valid JSON or does not match the schema."""


class IOFailure(ModcatError):
    """Raised for filesystem errors in data owned by modcat."""


class RegistryStoreError(IOFailure):
    """Raised when the persisted registry cannot be read or written."""


class ConfigurationError(ModcatError):
    """Raised for issues related to configuration loading or validation."""
