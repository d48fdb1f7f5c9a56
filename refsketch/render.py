"""Scene rendering as a list of backend-agnostic draw commands."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union

from .errors import ResolutionError
from .infer import InferController
from .model import SLOT_PROPS, Step, StepKind
from .resolve import Resolver, execute
from .session import Session
from .values import Coord

logger = logging.getLogger(__name__)


class Style(Enum):
    NORMAL = "normal"
    AVAILABLE = "available"
    SELECTED = "selected"
    ERROR = "error"


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class CircleCmd:
    center: Coord
    radius: float
    style: Style = Style.NORMAL
    filled: bool = False


@dataclass(frozen=True)
class SegmentCmd:
    start: Coord
    end: Coord
    style: Style = Style.NORMAL


@dataclass(frozen=True)
class ErrorCmd:
    """Marks a step that could not be resolved; ``at`` is ``None`` when no part resolved."""

    step_id: int
    message: str
    at: Optional[Coord] = None
    style: Style = Style.ERROR


DrawCommand = Union[Clear, CircleCmd, SegmentCmd, ErrorCmd]


def _error_anchor(resolver: Resolver, step: Step) -> Optional[Coord]:
    for prop in SLOT_PROPS[step.kind]:
        try:
            return resolver.resolve_point(step.slot(prop))
        except ResolutionError:
            continue
    return None


def render(session: Session, controller: Optional[InferController] = None) -> List[DrawCommand]:
    """Build the full frame for the current session state.

    One failing step never aborts the frame: it becomes an :class:`ErrorCmd`
    and every other primitive is still drawn.
    """

    config = session.config
    resolver = session.resolver()
    commands: List[DrawCommand] = [Clear()]

    steps_by_id = {step.id: step for step in session.steps}
    for drawable in execute(resolver, session.steps):
        if drawable.geometry is None:
            step = steps_by_id[drawable.step_id]
            commands.append(
                ErrorCmd(drawable.step_id, str(drawable.error), _error_anchor(resolver, step))
            )
        elif drawable.kind is StepKind.DRAW_POINT:
            commands.append(CircleCmd(drawable.geometry[0], config.point_radius))
        else:
            start, end = drawable.geometry
            commands.append(SegmentCmd(start, end))

    armed = controller is not None and not controller.drop_stale_target() and controller.is_armed
    marker_style = Style.AVAILABLE if armed else Style.NORMAL
    for point in session.snap_points(resolver):
        commands.append(CircleCmd(point.coord, config.marker_radius, marker_style))

    if armed:
        hover = controller.hit_test(resolver)  # type: ignore[union-attr]
        if hover is not None:
            commands.append(CircleCmd(hover.coord, config.marker_radius, Style.SELECTED, filled=hover.bound))

    errors = sum(1 for cmd in commands if isinstance(cmd, ErrorCmd))
    if errors:
        logger.info("Rendered %d command(s), %d step(s) failed to resolve", len(commands), errors)
    return commands


__all__ = [
    "Style",
    "Clear",
    "CircleCmd",
    "SegmentCmd",
    "ErrorCmd",
    "DrawCommand",
    "render",
]
