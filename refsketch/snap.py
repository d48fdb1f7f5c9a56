"""Snap-point index and nearest-anchor lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Hashable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import ResolutionError
from .logging_utils import apply_debug_logging
from .model import Step
from .path import ReferencePath
from .resolve import Resolver
from .values import Coord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SnapPoint:
    path: ReferencePath
    coord: Coord


@dataclass(frozen=True)
class SnapHit:
    point: SnapPoint
    distance: float


def structure_key(steps: Sequence[Step]) -> Tuple[Hashable, ...]:
    """Key that changes only when steps are added, removed or reordered."""

    return tuple((step.id, step.kind) for step in steps)


class SnapIndex:
    """All anchor paths of a step sequence, memoized on its structure.

    Anchors depend on which steps exist and on their kind, never on their
    coordinates, so value edits keep the cached paths.
    """

    def __init__(self) -> None:
        self._key: Optional[Tuple[Hashable, ...]] = None
        self._paths: Tuple[ReferencePath, ...] = ()
        self.recomputations = 0

    def paths(self, steps: Sequence[Step]) -> Tuple[ReferencePath, ...]:
        key = structure_key(steps)
        if key != self._key:
            self._paths = tuple(path for step in steps for path in step.anchors())
            self._key = key
            self.recomputations += 1
            logger.debug("Snap index rebuilt: %d anchor(s) over %d step(s)", len(self._paths), len(steps))
        return self._paths

    def invalidate(self) -> None:
        self._key = None

    def resolved(self, resolver: Resolver, steps: Sequence[Step]) -> List[SnapPoint]:
        points: List[SnapPoint] = []
        for path in self.paths(steps):
            try:
                coord = resolver.resolve(path)
            except ResolutionError as exc:
                logger.debug("Skipping snap point %s: %s", path.describe(), exc)
                continue
            points.append(SnapPoint(path, coord))  # type: ignore[arg-type]
        return points

    def __len__(self) -> int:
        return len(self._paths)


def nearest(cursor: Coord, points: Sequence[SnapPoint], threshold: float) -> Optional[SnapHit]:
    """Return the snap point closest to ``cursor`` if it lies within ``threshold``.

    Among several points within the threshold the closest one wins; exact
    distance ties go to the earliest point in index order.
    """

    if not points:
        return None
    coords = np.asarray([point.coord for point in points], dtype=float)
    distances = np.hypot(coords[:, 0] - cursor[0], coords[:, 1] - cursor[1])
    best = int(np.argmin(distances))
    distance = float(distances[best])
    if distance >= threshold:
        return None
    return SnapHit(points[best], distance)


apply_debug_logging(globals(), logger=logger, skip={"SnapPoint", "SnapHit", "structure_key"})

__all__ = ["SnapPoint", "SnapHit", "SnapIndex", "structure_key", "nearest"]
