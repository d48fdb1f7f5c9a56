"""Session state: the step and data collections and their mutations.

A :class:`Session` is the single writer for one drawing.  Every mutation
declares what it invalidates (:class:`Invalidation`) and notifies
subscribers after the change is applied, so observers always see the most
recent state:

* ``STRUCTURE`` - steps were added or removed; the snap index is rebuilt.
* ``VALUES`` - a stored value changed; anchors stay, coordinates move.
* ``INFER`` - the armed infer target or the hover candidate changed.

Slots are addressed with reference paths.  ``step[2].start`` is the stored
start point of line 2, ``step[2].start.x`` the x coordinate inside that
point (only while the point is a literal), ``data[0].self`` a data value.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from enum import Flag, auto
from typing import Callable, Dict, List, Optional, Union

from .config import SketchConfig, get_config
from .errors import InvalidProperty, SessionError
from .model import SLOT_PROPS, Data, DataKind, Step
from .path import Collection, Prop, ReferencePath
from .resolve import Drawable, Resolver, execute
from .snap import SnapIndex, SnapPoint
from .values import Literal, PointXY, Reference, Resolvable, literal_number, literal_point

logger = logging.getLogger(__name__)

Entity = Union[Step, Data]


class Invalidation(Flag):
    NONE = 0
    STRUCTURE = auto()
    VALUES = auto()
    INFER = auto()


Subscriber = Callable[[Invalidation], None]


class Session:
    def __init__(self, config: Optional[SketchConfig] = None) -> None:
        self.config = config or get_config()
        self.steps: List[Step] = []
        self.data: List[Data] = []
        self.snap_index = SnapIndex()
        self._next_ids: Dict[Collection, int] = {Collection.STEPS: 0, Collection.DATA: 0}
        self._subscribers: List[Subscriber] = []

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def notify(self, change: Invalidation) -> None:
        for callback in list(self._subscribers):
            callback(change)

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    def _allocate_id(self, collection: Collection) -> int:
        new_id = self._next_ids[collection]
        self._next_ids[collection] = new_id + 1
        return new_id

    def add_point(self, x: float = 0.0, y: float = 0.0) -> Step:
        step = Step.draw_point(self._allocate_id(Collection.STEPS), literal_point(x, y))
        return self._append_step(step)

    def add_line(self, x1: float = 0.0, y1: float = 0.0, x2: float = 0.0, y2: float = 0.0) -> Step:
        step = Step.draw_line(
            self._allocate_id(Collection.STEPS), literal_point(x1, y1), literal_point(x2, y2)
        )
        return self._append_step(step)

    def _append_step(self, step: Step) -> Step:
        self.steps.append(step)
        logger.info("Added %s #%d", step.describe(), step.id)
        self.notify(Invalidation.STRUCTURE | Invalidation.VALUES)
        return step

    def remove_step(self, step_id: int) -> Step:
        step = self.step(step_id)
        self.steps = [s for s in self.steps if s.id != step_id]
        logger.info("Removed %s #%d", step.describe(), step_id)
        self.notify(Invalidation.STRUCTURE | Invalidation.VALUES)
        return step

    def add_number(self, value: float = 0.0) -> Data:
        return self._append_data(Data.number(self._allocate_id(Collection.DATA), value))

    def add_point_data(self, x: float = 0.0, y: float = 0.0) -> Data:
        return self._append_data(Data.point(self._allocate_id(Collection.DATA), x, y))

    def _append_data(self, item: Data) -> Data:
        self.data.append(item)
        logger.info("Added %s data #%d", item.describe(), item.id)
        self.notify(Invalidation.VALUES)
        return item

    def remove_data(self, data_id: int) -> Data:
        item = self.data_item(data_id)
        self.data = [d for d in self.data if d.id != data_id]
        logger.info("Removed %s data #%d", item.describe(), data_id)
        self.notify(Invalidation.VALUES)
        return item

    def step(self, step_id: int) -> Step:
        for step in self.steps:
            if step.id == step_id:
                return step
        raise SessionError(f"no step with id {step_id}")

    def data_item(self, data_id: int) -> Data:
        for item in self.data:
            if item.id == data_id:
                return item
        raise SessionError(f"no data with id {data_id}")

    def entity(self, collection: Collection, entity_id: int) -> Entity:
        if collection is Collection.STEPS:
            return self.step(entity_id)
        return self.data_item(entity_id)

    # ------------------------------------------------------------------
    # Slots
    # ------------------------------------------------------------------

    def _stored(self, slot: ReferencePath) -> Resolvable:
        entity = self.entity(slot.collection, slot.id)
        try:
            return entity.slot(slot.head)
        except InvalidProperty as exc:
            raise SessionError(f"{slot.describe()} is not a stored slot: {exc}") from None

    def slot_value(self, slot: ReferencePath) -> Resolvable:
        stored = self._stored(slot)
        if slot.axis is None:
            return stored
        components = self._components(slot, stored)
        return components.x if slot.axis is Prop.X else components.y

    def is_scalar_slot(self, slot: ReferencePath) -> bool:
        if slot.axis is not None:
            return True
        entity = self.entity(slot.collection, slot.id)
        return isinstance(entity, Data) and entity.kind is DataKind.NUMBER

    def set_slot(self, slot: ReferencePath, value: Resolvable) -> Resolvable:
        """Replace the value stored at ``slot`` and return the previous one."""

        self._check_shape(slot, value)
        entity = self.entity(slot.collection, slot.id)
        stored = self._stored(slot)
        if slot.axis is None:
            previous = entity.replace_slot(slot.head, value)
        else:
            components = self._components(slot, stored)
            if slot.axis is Prop.X:
                previous, updated = components.x, replace(components, x=value)
            else:
                previous, updated = components.y, replace(components, y=value)
            entity.replace_slot(slot.head, Literal(updated))
        logger.info("Set %s to %s", slot.describe(), value.describe())
        self.notify(Invalidation.VALUES)
        return previous

    def edit_number(self, slot: ReferencePath, value: float) -> Resolvable:
        if not self.is_scalar_slot(slot):
            raise SessionError(f"{slot.describe()} holds a point; edit its .x or .y instead")
        return self.set_slot(slot, literal_number(value))

    def detach(self, slot: ReferencePath) -> Resolvable:
        """Turn a referencing slot back into a literal at its current value."""

        current = self.slot_value(slot)
        if not isinstance(current, Reference):
            return current
        resolved = self.resolver().resolve(current.path)
        if isinstance(resolved, tuple):
            if self.is_scalar_slot(slot):
                raise SessionError(f"{slot.describe()} references a point but holds a number")
            literal = literal_point(*resolved)
        else:
            literal = literal_number(resolved)
        return self.set_slot(slot, literal)

    def _components(self, slot: ReferencePath, stored: Resolvable) -> PointXY:
        if isinstance(stored, Literal) and isinstance(stored.value, PointXY):
            return stored.value
        raise SessionError(
            f"{slot.base.describe()} is not a literal point; detach it before addressing .{slot.axis.value}"  # type: ignore[union-attr]
        )

    def _check_shape(self, slot: ReferencePath, value: Resolvable) -> None:
        if isinstance(value, Reference):
            return
        if not isinstance(value, Literal):
            raise SessionError(f"slot values must be Literal or Reference, got {value!r}")
        wants_number = self.is_scalar_slot(slot)
        holds_point = isinstance(value.value, PointXY)
        if wants_number and holds_point:
            raise SessionError(f"{slot.describe()} holds a number, got a point literal")
        if not wants_number and not holds_point:
            raise SessionError(f"{slot.describe()} holds a point, got a number literal")

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def resolver(self) -> Resolver:
        return Resolver(self.steps, self.data, max_depth=self.config.max_depth)

    def execute(self) -> List[Drawable]:
        return execute(self.resolver(), self.steps)

    def snap_paths(self):
        return self.snap_index.paths(self.steps)

    def snap_points(self, resolver: Optional[Resolver] = None) -> List[SnapPoint]:
        return self.snap_index.resolved(resolver or self.resolver(), self.steps)

    def slot_paths(self, step_id: int) -> List[ReferencePath]:
        step = self.step(step_id)
        return [ReferencePath.step(step.id, prop) for prop in SLOT_PROPS[step.kind]]

    def reference_options(self, step_id: int) -> List[ReferencePath]:
        """Anchors of the steps declared before ``step_id``."""

        options: List[ReferencePath] = []
        for step in self.steps:
            if step.id == step_id:
                return options
            options.extend(step.anchors())
        raise SessionError(f"no step with id {step_id}")


__all__ = ["Invalidation", "Session", "Subscriber"]
