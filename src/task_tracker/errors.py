from __future__ import annotations


# PUBLIC_INTERFACE
class StoreError(Exception):
    """
    Raised by task stores when the backend is unreachable or fails unexpectedly.

    Validation problems and missing records are not store errors: the former
    are rejected by the request schemas, the latter are reported by the store
    methods returning None/False.
    """

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        return self.message
