class StoreError(RuntimeError):
    """Raised when the external catalog/cart store fails or is unreachable."""


class ConflictError(StoreError):
    """Raised when a write collides with a row another writer created first."""
