"""Reference resolution.

A :class:`Resolver` is a snapshot view over the step and data collections of
a session.  ``resolve(path)`` selects the collection, finds the entity by id,
applies the property chain and recursively resolves whatever it finds until a
literal is reached.  Line midpoints are computed, not stored.

Resolution is guarded against reference cycles: the chain of paths currently
being resolved is tracked and revisiting one of them (or exceeding
``max_depth`` nested lookups) raises :class:`UnresolvedCycle` instead of
recursing forever.  Results are memoized per resolver, so one redraw pass
resolves every shared anchor once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .config import get_config
from .errors import InvalidProperty, MalformedPath, ResolutionError, UnknownId, UnresolvedCycle
from .logging_utils import apply_debug_logging
from .model import ANCHOR_PROPS, SLOT_PROPS, Data, DataKind, Step, StepKind
from .path import Collection, Prop, ReferencePath
from .values import Coord, Literal, PointXY, Reference, Resolvable

logger = logging.getLogger(__name__)

Value = Union[float, Coord]


class Resolver:
    def __init__(
        self,
        steps: Iterable[Step],
        data: Iterable[Data] = (),
        *,
        max_depth: Optional[int] = None,
    ) -> None:
        self.steps: Dict[int, Step] = {step.id: step for step in steps}
        self.data: Dict[int, Data] = {item.id: item for item in data}
        self.max_depth = max_depth if max_depth is not None else get_config().max_depth
        self._memo: Dict[ReferencePath, Value] = {}
        self._chain: List[ReferencePath] = []

    def resolve(self, path: ReferencePath) -> Value:
        """Resolve ``path`` to a float (axis/number paths) or an ``(x, y)`` pair."""

        cached = self._memo.get(path)
        if cached is not None:
            return cached
        if path in self._chain:
            loop = " -> ".join(p.describe() for p in self._chain[self._chain.index(path):])
            raise UnresolvedCycle(f"reference cycle {loop} -> {path.describe()}", path)
        if len(self._chain) >= self.max_depth:
            raise UnresolvedCycle(f"reference chain deeper than {self.max_depth}", path)

        self._chain.append(path)
        try:
            value = self._lookup(path)
        finally:
            self._chain.pop()
        self._memo[path] = value
        return value

    def resolve_point(self, value: Resolvable) -> Coord:
        if isinstance(value, Reference):
            resolved = self.resolve(value.path)
            if not isinstance(resolved, tuple):
                raise MalformedPath("path names a number, a point was requested", value.path)
            return resolved
        if isinstance(value, Literal) and isinstance(value.value, PointXY):
            return (self.resolve_number(value.value.x), self.resolve_number(value.value.y))
        raise TypeError(f"expected a point literal or reference, got {value!r}")

    def resolve_number(self, value: Resolvable) -> float:
        if isinstance(value, Reference):
            resolved = self.resolve(value.path)
            if isinstance(resolved, tuple):
                raise MalformedPath("path names a point, add .x or .y to select a number", value.path)
            return resolved
        if isinstance(value, Literal) and not isinstance(value.value, PointXY):
            return float(value.value)
        raise TypeError(f"expected a number literal or reference, got {value!r}")

    def resolve_literal(self, literal: Literal) -> Value:
        if isinstance(literal.value, PointXY):
            return self.resolve_point(literal)
        return self.resolve_number(literal)

    def _lookup(self, path: ReferencePath) -> Value:
        if path.collection is Collection.STEPS:
            value = self._lookup_step(path)
        else:
            value = self._lookup_data(path)

        axis = path.axis
        if axis is None:
            return value
        if not isinstance(value, tuple):
            raise InvalidProperty(f"a number has no '{axis.value}' component", path)
        return value[0] if axis is Prop.X else value[1]

    def _lookup_step(self, path: ReferencePath) -> Value:
        step = self.steps.get(path.id)
        if step is None:
            raise UnknownId(f"no step with id {path.id}", path)
        head = path.head
        if head not in ANCHOR_PROPS[step.kind]:
            raise InvalidProperty(f"{step.describe()} #{step.id} has no property '{head.value}'", path)
        if head in SLOT_PROPS[step.kind]:
            return self.resolve_point(step.slot(head))
        # mid is the only computed anchor
        start = self.resolve_point(step.slot(Prop.START))
        end = self.resolve_point(step.slot(Prop.END))
        return midpoint(start, end)

    def _lookup_data(self, path: ReferencePath) -> Value:
        item = self.data.get(path.id)
        if item is None:
            raise UnknownId(f"no data with id {path.id}", path)
        if path.head is not Prop.SELF:
            raise InvalidProperty(f"{item.describe()} data #{item.id} has no property '{path.head.value}'", path)
        if item.kind is DataKind.NUMBER:
            return self.resolve_number(item.value)
        return self.resolve_point(item.value)


def midpoint(a: Coord, b: Coord) -> Coord:
    return ((a[0] + b[0]) / 2.0, (a[1] + b[1]) / 2.0)


def resolve(
    path: ReferencePath,
    steps: Iterable[Step],
    data: Iterable[Data] = (),
    *,
    max_depth: Optional[int] = None,
) -> Value:
    return Resolver(steps, data, max_depth=max_depth).resolve(path)


@dataclass
class Drawable:
    """Outcome of resolving one step: its geometry or the error that stopped it."""

    step_id: int
    kind: StepKind
    geometry: Optional[Tuple[Coord, ...]] = None
    error: Optional[ResolutionError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def snap_points(self) -> List[Coord]:
        if self.geometry is None:
            return []
        if self.kind is StepKind.DRAW_POINT:
            return [self.geometry[0]]
        start, end = self.geometry
        return [start, midpoint(start, end), end]


def execute(resolver: Resolver, steps: Iterable[Step]) -> List[Drawable]:
    """Resolve every step, keeping failures local to the failing step."""

    drawables: List[Drawable] = []
    for step in steps:
        try:
            geometry = tuple(resolver.resolve_point(step.slot(prop)) for prop in SLOT_PROPS[step.kind])
        except ResolutionError as exc:
            logger.info("Cannot resolve %s #%d: %s", step.describe(), step.id, exc)
            drawables.append(Drawable(step.id, step.kind, error=exc))
            continue
        drawables.append(Drawable(step.id, step.kind, geometry=geometry))
    return drawables


apply_debug_logging(globals(), logger=logger, skip={"midpoint", "Drawable"})

__all__ = [
    "Value",
    "Resolver",
    "resolve",
    "midpoint",
    "Drawable",
    "execute",
]
