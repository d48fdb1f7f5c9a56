"""Infer gesture: bind a slot to whatever snap point the user clicks near.

The controller is a two-state machine::

    Idle --arm(slot)--> InferArmed(slot)
    InferArmed --pointer_down--> Idle   (slot := hover candidate)
    InferArmed --cancel--> Idle         (slot untouched)

While armed, the hover candidate is recomputed from the current cursor on
every access: a ``Reference`` to the nearest snap point within the hit
threshold, or a free ``Literal`` at the cursor.  Anchors of the step that
owns the armed slot are never offered, which keeps a step from binding to
itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .config import SketchConfig
from .errors import SessionError
from .path import Prop, ReferencePath
from .resolve import Resolver
from .session import Invalidation, Session
from .snap import SnapHit, nearest
from .values import Coord, Literal, Reference, Resolvable, literal_number, literal_point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class InferArmed:
    target: ReferencePath


InferState = Union[Idle, InferArmed]

IDLE = Idle()


@dataclass(frozen=True)
class HoverCandidate:
    value: Resolvable
    coord: Coord
    hit: Optional[SnapHit] = None

    @property
    def bound(self) -> bool:
        return isinstance(self.value, Reference)


@dataclass(frozen=True)
class Viewport:
    """Projects client (pixel) positions onto the logical canvas."""

    width: float = 80.0
    height: float = 50.0

    @classmethod
    def from_config(cls, config: SketchConfig) -> "Viewport":
        return cls(config.canvas_width, config.canvas_height)

    def to_logical(self, client_x: float, client_y: float, rect: Tuple[float, float, float, float]) -> Coord:
        left, top, rect_width, rect_height = rect
        if rect_width <= 0 or rect_height <= 0:
            raise ValueError(f"canvas rect must have a positive size, got {rect!r}")
        nx = (client_x - left) / rect_width
        ny = (client_y - top) / rect_height
        return (nx * self.width, ny * self.height)


class InferController:
    def __init__(self, session: Session, *, threshold: Optional[float] = None) -> None:
        self.session = session
        self.threshold = threshold if threshold is not None else session.config.hit_threshold
        self.state: InferState = IDLE
        self.cursor: Optional[Coord] = None

    @property
    def is_armed(self) -> bool:
        return isinstance(self.state, InferArmed)

    @property
    def target(self) -> Optional[ReferencePath]:
        return self.state.target if isinstance(self.state, InferArmed) else None

    def arm(self, slot: ReferencePath) -> None:
        # raises SessionError for slots that do not exist
        self.session.slot_value(slot)
        if self.is_armed:
            logger.info("Re-arming infer: %s replaces %s", slot.describe(), self.target.describe())  # type: ignore[union-attr]
        else:
            logger.info("Infer armed on %s", slot.describe())
        self.state = InferArmed(slot)
        self.session.notify(Invalidation.INFER)

    def cancel(self) -> None:
        if not self.is_armed:
            return
        logger.info("Infer on %s cancelled", self.target.describe())  # type: ignore[union-attr]
        self.state = IDLE
        self.session.notify(Invalidation.INFER)

    def drop_stale_target(self) -> bool:
        """Return to Idle when the entity owning the armed slot was removed.

        Returns True if the target was dropped.
        """

        target = self.target
        if target is None:
            return False
        try:
            self.session.entity(target.collection, target.id)
        except SessionError:
            logger.info("Infer target %s no longer exists; back to idle", target.describe())
            self.state = IDLE
            return True
        return False

    def pointer_moved(self, pos: Coord) -> None:
        self.cursor = (float(pos[0]), float(pos[1]))
        if self.is_armed:
            self.session.notify(Invalidation.INFER)

    def pointer_down(self, pos: Optional[Coord] = None) -> Optional[HoverCandidate]:
        """Commit the hover candidate into the armed slot.

        Returns the committed candidate, or ``None`` when there is nothing to
        commit: idle, the armed slot's owner was removed, or no cursor yet.
        """

        if pos is not None:
            self.cursor = (float(pos[0]), float(pos[1]))
        if self.drop_stale_target():
            self.session.notify(Invalidation.INFER)
            return None
        if not isinstance(self.state, InferArmed):
            return None
        candidate = self.hit_test()
        if candidate is None:
            logger.warning("Click without a cursor position; %s stays armed", self.state.target.describe())
            return None
        target = self.state.target
        self.session.set_slot(target, candidate.value)
        self.state = IDLE
        logger.info("Infer committed %s := %s", target.describe(), candidate.value.describe())
        self.session.notify(Invalidation.INFER)
        return candidate

    @property
    def hover(self) -> Optional[HoverCandidate]:
        return self.hit_test()

    def hit_test(self, resolver: Optional[Resolver] = None) -> Optional[HoverCandidate]:
        self.drop_stale_target()
        if not isinstance(self.state, InferArmed) or self.cursor is None:
            return None
        target = self.state.target
        cursor = self.cursor
        points = [
            point
            for point in self.session.snap_points(resolver)
            if not (point.path.collection is target.collection and point.path.id == target.id)
        ]
        hit = nearest(cursor, points, self.threshold)
        scalar = self.session.is_scalar_slot(target)
        axis = target.axis or Prop.X

        if hit is None:
            logger.debug("Hover at (%.3f, %.3f): free point", cursor[0], cursor[1])
            if scalar:
                free: Literal = literal_number(cursor[0] if axis is Prop.X else cursor[1])
            else:
                free = literal_point(*cursor)
            return HoverCandidate(free, cursor)

        logger.debug("Hover at (%.3f, %.3f): %s at %.3f", cursor[0], cursor[1], hit.point.path.describe(), hit.distance)
        path = hit.point.path.with_axis(axis) if scalar else hit.point.path
        return HoverCandidate(Reference(path), hit.point.coord, hit)


__all__ = [
    "Idle",
    "InferArmed",
    "InferState",
    "IDLE",
    "HoverCandidate",
    "Viewport",
    "InferController",
]
