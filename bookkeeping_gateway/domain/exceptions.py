"""Domain-specific exceptions"""

from typing import Dict, Optional


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class BookkeepingAPIError(DomainException):
    """Bookkeeping API returned an error or is unavailable"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def is_client_error(self) -> bool:
        return self.status_code is not None and 400 <= self.status_code < 500


class ValidationFailed(DomainException):
    """Input rejected before anything is sent upstream"""

    def __init__(self, errors: Dict[str, str]):
        super().__init__("; ".join(f"{field}: {msg}" for field, msg in errors.items()))
        self.errors = errors
