from typing import Optional


class ClaimError(Exception):
    """Base exception for failures that abort a whole claim pass."""
    pass


class StoreUnavailableError(ClaimError):
    """Raised when the store endpoint is unreachable or answers without usable data."""

    def __init__(self, status_code: Optional[int], detail: str):
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"store unavailable (status={status_code}): {detail}")


class TransactionDecodeError(ClaimError):
    """Raised when a store response is not a list of transaction records."""
    pass
