"""Reference paths: immutable addresses of a quantity inside a session.

A path names a collection, one entity id inside it, and a short chain of
property selectors::

    step[3].mid        -> the midpoint anchor of line step 3
    step[0].self.x     -> the x coordinate of point step 0
    data[2].self       -> the value held by data entity 2

The selector chain is a closed grammar: one value selector (``self``,
``start``, ``mid``, ``end``) optionally followed by one axis selector (``x``
or ``y``).  The grammar is enforced when a path is built; whether a selector
is legal for the *kind* of the target is only known once the target is looked
up, see :mod:`refsketch.model` and :mod:`refsketch.resolve`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from .errors import MalformedPath


class Collection(Enum):
    STEPS = "step"
    DATA = "data"


class Prop(Enum):
    SELF = "self"
    START = "start"
    MID = "mid"
    END = "end"
    X = "x"
    Y = "y"

    @property
    def is_axis(self) -> bool:
        return self in (Prop.X, Prop.Y)


VALUE_PROPS = (Prop.SELF, Prop.START, Prop.MID, Prop.END)
AXIS_PROPS = (Prop.X, Prop.Y)


@dataclass(frozen=True)
class ReferencePath:
    collection: Collection
    id: int
    props: Tuple[Prop, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.collection, Collection):
            raise MalformedPath(f"path must start with a collection, got {self.collection!r}")
        if isinstance(self.id, bool) or not isinstance(self.id, int) or self.id < 0:
            raise MalformedPath(f"path id must be a non-negative integer, got {self.id!r}")
        props = tuple(self.props)
        object.__setattr__(self, "props", props)
        if not props:
            raise MalformedPath(f"path {self._render()} names no property")
        if len(props) > 2:
            raise MalformedPath(f"path {self._render()} has too many properties")
        head = props[0]
        if head not in VALUE_PROPS:
            raise MalformedPath(f"path {self._render()} must start with one of self|start|mid|end")
        if len(props) == 2 and props[1] not in AXIS_PROPS:
            raise MalformedPath(f"path {self._render()} may only end with an x|y selector")

    @classmethod
    def step(cls, step_id: int, *props: Prop) -> "ReferencePath":
        return cls(Collection.STEPS, step_id, props)

    @classmethod
    def data(cls, data_id: int, *props: Prop) -> "ReferencePath":
        return cls(Collection.DATA, data_id, props or (Prop.SELF,))

    @property
    def head(self) -> Prop:
        """The value selector (``self``/``start``/``mid``/``end``)."""

        return self.props[0]

    @property
    def axis(self) -> Optional[Prop]:
        return self.props[1] if len(self.props) == 2 else None

    @property
    def is_scalar(self) -> bool:
        return self.axis is not None

    @property
    def base(self) -> "ReferencePath":
        """Return the path with its axis selector stripped."""

        if self.axis is None:
            return self
        return ReferencePath(self.collection, self.id, (self.head,))

    def with_axis(self, axis: Prop) -> "ReferencePath":
        if axis not in AXIS_PROPS:
            raise MalformedPath(f"{axis!r} is not an axis selector", self)
        return ReferencePath(self.collection, self.id, (self.head, axis))

    def describe(self) -> str:
        return self._render()

    def _render(self) -> str:
        rendered = f"{getattr(self.collection, 'value', self.collection)}[{self.id}]"
        for prop in self.props:
            rendered += f".{getattr(prop, 'value', prop)}"
        return rendered

    def __str__(self) -> str:
        return self.describe()


_COLLECTION_RE = re.compile(r"[a-z]+")
_ID_RE = re.compile(r"\[(\d+)\]")
_PROP_RE = re.compile(r"\.([a-z]+)")

_COLLECTIONS = {c.value: c for c in Collection}
_PROPS = {p.value: p for p in Prop}


def parse_path(text: str, *, line: int = 1, col: int = 1) -> ReferencePath:
    """Parse the ``describe()`` form of a path.

    ``line``/``col`` locate ``text`` inside a larger source so that errors
    carry the same ``[line N, col M]`` prefix as the script parser.
    """

    def fail(offset: int, message: str) -> SyntaxError:
        return SyntaxError(f"[line {line}, col {col + offset}] {message}")

    m = _COLLECTION_RE.match(text, 0)
    if not m:
        raise fail(0, f"expected collection name, got {text[:1]!r}")
    collection = _COLLECTIONS.get(m.group(0))
    if collection is None:
        raise fail(0, f"unknown collection '{m.group(0)}' (expected step|data)")
    pos = m.end()

    m = _ID_RE.match(text, pos)
    if not m:
        raise fail(pos, "expected '[<id>]' after collection name")
    entity_id = int(m.group(1))
    pos = m.end()

    props = []
    while pos < len(text):
        m = _PROP_RE.match(text, pos)
        if not m:
            raise fail(pos, f"unexpected {text[pos:]!r}")
        prop = _PROPS.get(m.group(1))
        if prop is None:
            raise fail(pos + 1, f"unknown property '{m.group(1)}'")
        props.append(prop)
        pos = m.end()

    try:
        return ReferencePath(collection, entity_id, tuple(props))
    except MalformedPath as exc:
        raise fail(0, str(exc)) from exc


__all__ = [
    "Collection",
    "Prop",
    "VALUE_PROPS",
    "AXIS_PROPS",
    "ReferencePath",
    "parse_path",
]
