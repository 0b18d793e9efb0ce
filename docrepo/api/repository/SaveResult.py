"""Outcome of a raw-document save."""

from dataclasses import asdict, dataclass


@dataclass(frozen=True)
class SaveResult:
    id: str
    ok: bool
    message: str = ""

    def to_dict(self) -> dict:
        return asdict(self)
