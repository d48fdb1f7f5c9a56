"""Steps (drawable primitives) and free-standing data entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple

from .errors import InvalidProperty
from .path import Prop, ReferencePath
from .values import Literal, PointXY, Resolvable, literal_number, literal_point


class StepKind(Enum):
    DRAW_POINT = "DrawPoint"
    DRAW_LINE = "DrawLine"


class DataKind(Enum):
    NUMBER = "Number"
    POINT = "Point"


# Stored slots per kind; MID is computed from START and END.
SLOT_PROPS: Dict[StepKind, Tuple[Prop, ...]] = {
    StepKind.DRAW_POINT: (Prop.SELF,),
    StepKind.DRAW_LINE: (Prop.START, Prop.END),
}

ANCHOR_PROPS: Dict[StepKind, Tuple[Prop, ...]] = {
    StepKind.DRAW_POINT: (Prop.SELF,),
    StepKind.DRAW_LINE: (Prop.START, Prop.MID, Prop.END),
}


@dataclass
class Step:
    id: int
    kind: StepKind
    slots: Dict[Prop, Resolvable] = field(default_factory=dict)

    def __post_init__(self) -> None:
        expected = SLOT_PROPS[self.kind]
        for prop in expected:
            self.slots.setdefault(prop, literal_point(0.0, 0.0))
        extra = set(self.slots) - set(expected)
        if extra:
            names = ", ".join(sorted(p.value for p in extra))
            raise InvalidProperty(f"{self.kind.value} has no slot(s) {names}")

    @classmethod
    def draw_point(cls, step_id: int, point: Optional[Resolvable] = None) -> "Step":
        slots = {Prop.SELF: point} if point is not None else {}
        return cls(step_id, StepKind.DRAW_POINT, slots)

    @classmethod
    def draw_line(
        cls,
        step_id: int,
        start: Optional[Resolvable] = None,
        end: Optional[Resolvable] = None,
    ) -> "Step":
        slots: Dict[Prop, Resolvable] = {}
        if start is not None:
            slots[Prop.START] = start
        if end is not None:
            slots[Prop.END] = end
        return cls(step_id, StepKind.DRAW_LINE, slots)

    def describe(self) -> str:
        return self.kind.value

    def anchors(self) -> Tuple[ReferencePath, ...]:
        """Synthesize the snap-point paths this step exposes."""

        return tuple(ReferencePath.step(self.id, prop) for prop in ANCHOR_PROPS[self.kind])

    def anchor(self, prop: Prop) -> ReferencePath:
        if prop not in ANCHOR_PROPS[self.kind]:
            raise InvalidProperty(f"{self.kind.value} #{self.id} has no anchor '{prop.value}'")
        return ReferencePath.step(self.id, prop)

    def slot(self, prop: Prop) -> Resolvable:
        try:
            return self.slots[prop]
        except KeyError:
            raise InvalidProperty(
                f"{self.kind.value} #{self.id} has no stored '{prop.value}'"
            ) from None

    def replace_slot(self, prop: Prop, value: Resolvable) -> Resolvable:
        previous = self.slot(prop)
        self.slots[prop] = value
        return previous


@dataclass
class Data:
    id: int
    kind: DataKind
    value: Resolvable

    @classmethod
    def number(cls, data_id: int, value: float = 0.0) -> "Data":
        return cls(data_id, DataKind.NUMBER, literal_number(value))

    @classmethod
    def point(cls, data_id: int, x: float = 0.0, y: float = 0.0) -> "Data":
        return cls(data_id, DataKind.POINT, literal_point(x, y))

    def describe(self) -> str:
        return self.kind.value

    def slot(self, prop: Prop) -> Resolvable:
        if prop is not Prop.SELF:
            raise InvalidProperty(f"{self.kind.value} data #{self.id} only exposes 'self'")
        return self.value

    def replace_slot(self, prop: Prop, value: Resolvable) -> Resolvable:
        previous = self.slot(prop)
        self.value = value
        return previous


def point_components(value: Resolvable) -> Optional[PointXY]:
    """Return the coordinate pair of a literal point, ``None`` otherwise."""

    if isinstance(value, Literal) and isinstance(value.value, PointXY):
        return value.value
    return None


__all__ = [
    "StepKind",
    "DataKind",
    "SLOT_PROPS",
    "ANCHOR_PROPS",
    "Step",
    "Data",
    "point_components",
]
