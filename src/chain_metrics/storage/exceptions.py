"""Storage exception hierarchy."""


class StoreError(Exception):
    """Base exception for series store failures."""

    pass


class StoreWriteError(StoreError):
    """A batch upsert in which no record could be written."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.errors = errors or []
