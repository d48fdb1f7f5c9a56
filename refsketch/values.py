"""Resolvable values: either a stored literal or a reference path."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, Tuple, TypeVar, Union

from .path import ReferencePath

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .resolve import Resolver

T = TypeVar("T")

Coord = Tuple[float, float]


@dataclass(frozen=True)
class Literal(Generic[T]):
    value: T

    def resolve(self, resolver: "Resolver") -> Any:
        return resolver.resolve_literal(self)

    def describe(self) -> str:
        if isinstance(self.value, PointXY):
            return self.value.describe()
        return _format_number(self.value)


@dataclass(frozen=True)
class Reference:
    path: ReferencePath

    def resolve(self, resolver: "Resolver") -> Any:
        return resolver.resolve(self.path)

    def describe(self) -> str:
        return f"-> {self.path.describe()}"


Resolvable = Union[Literal, Reference]


@dataclass(frozen=True)
class PointXY:
    """A point whose coordinates resolve independently."""

    x: Resolvable
    y: Resolvable

    def describe(self) -> str:
        return f"({self.x.describe()}, {self.y.describe()})"


def literal_number(value: float) -> Literal:
    return Literal(float(value))


def literal_point(x: float, y: float) -> Literal:
    return Literal(PointXY(literal_number(x), literal_number(y)))


def is_reference(value: object) -> bool:
    return isinstance(value, Reference)


def _format_number(value: object) -> str:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return repr(value)
    formatted = f"{number:.4f}".rstrip("0").rstrip(".")
    return formatted if formatted not in ("", "-0") else "0"


__all__ = [
    "Coord",
    "Literal",
    "Reference",
    "Resolvable",
    "PointXY",
    "literal_number",
    "literal_point",
    "is_reference",
]
