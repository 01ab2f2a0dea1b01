from typing import Protocol


class ModelError(RuntimeError):
    """Transport, timeout or provider failure for a single completion."""

    def __init__(self, message: str, *, code: str = "model_unavailable"):
        super().__init__(message)
        self.code = code


class ModelClient(Protocol):
    @property
    def model_name(self) -> str: ...

    def complete(self, prompt: str) -> str: ...
