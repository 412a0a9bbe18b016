"""Consolidated exceptions for Headhunter.

All custom exceptions are defined here to provide a single source of truth
for error handling across the application.
"""


class HeadhunterError(Exception):
    """Base exception for Headhunter errors"""

    pass


class ApiClientError(HeadhunterError):
    """Base exception for game API client errors"""

    pass


class CredentialsExhaustedError(ApiClientError):
    """Raised when every API key has been evicted from the pool"""

    pass


class StorageError(HeadhunterError):
    """Base storage error"""

    pass


class StorageLimitError(StorageError):
    """Raised when a value exceeds the backend's per-key size limit"""

    pass


class ConfigurationError(HeadhunterError):
    """Raised when configuration is invalid or missing"""

    pass


class LockTimeoutError(HeadhunterError):
    """Raised when a named operation lock cannot be acquired in time"""

    pass
