"""TikZ renderer for draw commands.

Canvas coordinates grow downwards; TikZ grows upwards, so every ``y`` is
negated on output.  Styles map onto the ``rs/...`` TikZ styles declared in
the standalone preamble.
"""

from __future__ import annotations

import math
from typing import Dict, Iterable, List, Mapping, Optional

from ..config import get_config
from ..render import CircleCmd, Clear, DrawCommand, ErrorCmd, SegmentCmd, Style
from ..values import Coord

standalone_tpl = r"""\documentclass[border=2pt]{standalone}
\usepackage{tikz}
\tikzset{
  rs/normal/.style={draw=%(normal)s, line width=\rsLW},
  rs/available/.style={draw=%(available)s, line width=\rsLW},
  rs/selected/.style={draw=%(selected)s, line width=\rsLW},
  rs/error/.style={draw=%(error)s, line width=\rsLW, dash pattern=on 3pt off 2pt},
  rs/line width/.store in=\rsLW, rs/line width=0.8pt,
}
\begin{document}
%(body)s
\end{document}
"""

_ERROR_MARK_RADIUS = 1.6


def _format_float(value: float) -> str:
    if math.isnan(value) or math.isinf(value):
        raise ValueError("Cannot format non-finite float for TikZ output")
    formatted = f"{value:.4f}"
    formatted = formatted.rstrip("0").rstrip(".")
    return formatted if formatted not in ("", "-0") else "0"


def _coord(point: Coord) -> str:
    return f"({_format_float(point[0])}, {_format_float(-point[1])})"


def _style_opts(style: Style, filled: bool = False, colors: Optional[Mapping[str, str]] = None) -> str:
    opts = [f"rs/{style.value}"]
    if filled and colors is not None:
        opts.append(f"fill={colors[style.value]}")
    return ", ".join(opts)


def generate_tikz_code(
    commands: Iterable[DrawCommand],
    *,
    scale: float = 0.1,
    colors: Optional[Mapping[str, str]] = None,
) -> str:
    """Emit a ``tikzpicture`` for ``commands``; ``Clear`` only resets the list."""

    palette: Dict[str, str] = dict(colors or get_config().colors)
    body: List[str] = []
    for command in commands:
        if isinstance(command, Clear):
            body = []
        elif isinstance(command, CircleCmd):
            action = "\\filldraw" if command.filled else "\\draw"
            body.append(
                f"  {action}[{_style_opts(command.style, command.filled, palette)}] "
                f"{_coord(command.center)} circle ({_format_float(command.radius)});"
            )
        elif isinstance(command, SegmentCmd):
            body.append(
                f"  \\draw[{_style_opts(command.style)}] {_coord(command.start)} -- {_coord(command.end)};"
            )
        elif isinstance(command, ErrorCmd):
            body.append(f"  % step {command.step_id}: {_tex_comment(command.message)}")
            if command.at is not None:
                body.append(
                    f"  \\draw[{_style_opts(command.style)}] {_coord(command.at)} "
                    f"circle ({_format_float(_ERROR_MARK_RADIUS)});"
                )
        else:
            raise TypeError(f"unknown draw command {command!r}")

    lines = [f"\\begin{{tikzpicture}}[scale={_format_float(scale)}]"]
    lines.extend(body)
    lines.append("\\end{tikzpicture}")
    return "\n".join(lines)


def generate_tikz_document(
    commands: Iterable[DrawCommand],
    *,
    scale: float = 0.1,
    colors: Optional[Mapping[str, str]] = None,
) -> str:
    """Render a standalone LaTeX document around :func:`generate_tikz_code`."""

    palette: Dict[str, str] = dict(colors or get_config().colors)
    code = generate_tikz_code(commands, scale=scale, colors=palette)
    return standalone_tpl % dict(palette, body=code)


def _tex_comment(text: str) -> str:
    return " ".join(text.split())


__all__ = ["generate_tikz_code", "generate_tikz_document"]
