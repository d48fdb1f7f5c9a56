"""Line-based event scripts that replay UI input against a session.

One event per line, ``#`` starts a comment::

    point 10 10            # step 0
    line 0 0 40 20         # step 1
    number 2.5             # data 0
    pointdata 5 5          # data 1
    infer step[0].self
    move 20 10.5
    click
    set step[1].end.x 60
    detach step[0].self
    remove step 1
    cancel

Slots use the reference-path syntax of :func:`refsketch.path.parse_path`.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .errors import SketchError
from .infer import InferController
from .path import parse_path
from .session import Session

logger = logging.getLogger(__name__)

_ERROR_LOC_RE = re.compile(r"\[line (\d+), col (\d+)\]")
_TOKEN_RE = re.compile(r"\S+")
_NUM_RE = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?$")

Token = Tuple[str, int]  # (text, col)


@dataclass
class Span:
    line: int
    col: int


@dataclass
class Event:
    kind: str
    span: Span
    args: Dict[str, Any] = field(default_factory=dict)


@dataclass
class Script:
    events: List[Event] = field(default_factory=list)


class ScriptError(SketchError):
    """An event failed while the script was being applied."""

    def __init__(self, message: str, event: Event):
        super().__init__(message)
        self.event = event


def tokenize_line(s: str) -> List[Token]:
    comment = s.find("#")
    if comment >= 0:
        s = s[:comment]
    return [(m.group(0), m.start() + 1) for m in _TOKEN_RE.finditer(s)]


def _number(tok: Token, line: int) -> float:
    text, col = tok
    if not _NUM_RE.match(text):
        raise SyntaxError(f"[line {line}, col {col}] expected NUMBER, got '{text}'")
    return float(text)


def _integer(tok: Token, line: int) -> int:
    text, col = tok
    if not text.isdigit():
        raise SyntaxError(f"[line {line}, col {col}] expected integer id, got '{text}'")
    return int(text)


def _slot(tok: Token, line: int):
    text, col = tok
    return parse_path(text, line=line, col=col)


def _arity(tokens: List[Token], line: int, *counts: int) -> None:
    given = len(tokens) - 1
    if given in counts:
        return
    want = " or ".join(str(c) for c in counts)
    if given > max(counts):
        text, col = tokens[max(counts) + 1]
        raise SyntaxError(f"[line {line}, col {col}] unexpected '{text}' ({tokens[0][0]} takes {want} argument(s))")
    end_col = tokens[-1][1] + len(tokens[-1][0])
    raise SyntaxError(f"[line {line}, col {end_col}] {tokens[0][0]} takes {want} argument(s), got {given}")


def parse_event(tokens: List[Token], line: int) -> Event:
    keyword, col = tokens[0]
    kind = keyword.lower()
    span = Span(line, col)
    args = tokens[1:]

    if kind in ("point", "pointdata", "move"):
        _arity(tokens, line, 2)
        return Event(kind, span, {"x": _number(args[0], line), "y": _number(args[1], line)})
    if kind == "line":
        _arity(tokens, line, 4)
        x1, y1, x2, y2 = (_number(tok, line) for tok in args)
        return Event(kind, span, {"start": (x1, y1), "end": (x2, y2)})
    if kind == "number":
        _arity(tokens, line, 1)
        return Event(kind, span, {"value": _number(args[0], line)})
    if kind == "remove":
        _arity(tokens, line, 2)
        which, which_col = args[0]
        if which not in ("step", "data"):
            raise SyntaxError(f"[line {line}, col {which_col}] expected 'step' or 'data', got '{which}'")
        return Event(kind, span, {"collection": which, "id": _integer(args[1], line)})
    if kind == "set":
        _arity(tokens, line, 2)
        return Event(kind, span, {"slot": _slot(args[0], line), "value": _number(args[1], line)})
    if kind in ("detach", "infer"):
        _arity(tokens, line, 1)
        return Event(kind, span, {"slot": _slot(args[0], line)})
    if kind == "click":
        _arity(tokens, line, 0, 2)
        if args:
            return Event(kind, span, {"pos": (_number(args[0], line), _number(args[1], line))})
        return Event(kind, span, {"pos": None})
    if kind == "cancel":
        _arity(tokens, line, 0)
        return Event(kind, span)
    raise SyntaxError(f"[line {line}, col {col}] unknown event '{keyword}'")


def _augment_syntax_error(err: SyntaxError, line_text: str) -> Optional[SyntaxError]:
    message = str(err)
    if not line_text or "\n" in message:
        return None
    match = _ERROR_LOC_RE.search(message)
    if not match:
        return None
    col = max(int(match.group(2)), 1)
    caret_line = " " * (col - 1) + "^"
    snippet = f"    {line_text.rstrip()}\n    {caret_line}"
    return SyntaxError(f"{message}\n{snippet}")


def parse_script(text: str) -> Script:
    script = Script()
    for i, raw in enumerate(text.splitlines(), start=1):
        tokens = tokenize_line(raw)
        if not tokens:
            continue
        try:
            event = parse_event(tokens, i)
        except SyntaxError as err:
            augmented = _augment_syntax_error(err, raw)
            if augmented is None:
                raise
            raise augmented from None
        script.events.append(event)
    return script


def _apply(event: Event, session: Session, controller: InferController) -> None:
    a = event.args
    handlers: Dict[str, Callable[[], Any]] = {
        "point": lambda: session.add_point(a["x"], a["y"]),
        "line": lambda: session.add_line(*a["start"], *a["end"]),
        "number": lambda: session.add_number(a["value"]),
        "pointdata": lambda: session.add_point_data(a["x"], a["y"]),
        "remove": lambda: (
            session.remove_step(a["id"]) if a["collection"] == "step" else session.remove_data(a["id"])
        ),
        "set": lambda: session.edit_number(a["slot"], a["value"]),
        "detach": lambda: session.detach(a["slot"]),
        "infer": lambda: controller.arm(a["slot"]),
        "move": lambda: controller.pointer_moved((a["x"], a["y"])),
        "click": lambda: controller.pointer_down(a["pos"]),
        "cancel": controller.cancel,
    }
    handlers[event.kind]()


def run_script(
    script: Script,
    session: Optional[Session] = None,
    controller: Optional[InferController] = None,
) -> Tuple[Session, InferController]:
    """Apply every event in order; each one completes before the next starts."""

    session = session or Session()
    controller = controller or InferController(session)
    for event in script.events:
        logger.debug("Applying %s at line %d", event.kind, event.span.line)
        try:
            _apply(event, session, controller)
        except SketchError as exc:
            raise ScriptError(f"[line {event.span.line}, col {event.span.col}] {event.kind}: {exc}", event) from exc
    return session, controller


__all__ = [
    "Span",
    "Event",
    "Script",
    "ScriptError",
    "tokenize_line",
    "parse_event",
    "parse_script",
    "run_script",
]
