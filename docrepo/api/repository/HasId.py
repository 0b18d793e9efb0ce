"""Identifier capability required of entities passed to ``delete``."""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class HasId(Protocol):
    id: Any
