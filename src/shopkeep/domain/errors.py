from __future__ import annotations

from dataclasses import dataclass


class CurationError(RuntimeError):
    pass


class LoadError(CurationError):
    pass


class GenerationError(CurationError):
    pass


class ExtractionError(CurationError):
    def __init__(self, message: str, *, raw_response: str) -> None:
        super().__init__(message)
        self.raw_response = raw_response

    def __str__(self) -> str:
        return f"{self.args[0]}\nRaw response:\n{self.raw_response}"


class PersistError(CurationError):
    pass


@dataclass(frozen=True)
class ValidationWarning:
    kind: str
    item: str
    character: str

    HALLUCINATED = "hallucinated"
    DUPLICATE = "duplicate"
