"""matplotlib renderer for draw commands."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Mapping, Optional, Union

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
from matplotlib.axes import Axes  # noqa: E402
from matplotlib.patches import Circle  # noqa: E402

from ..config import get_config  # noqa: E402
from ..render import CircleCmd, Clear, DrawCommand, ErrorCmd, SegmentCmd  # noqa: E402

logger = logging.getLogger(__name__)

_ERROR_MARK_RADIUS = 1.6


def draw_commands(
    ax: Axes,
    commands: Iterable[DrawCommand],
    *,
    colors: Optional[Mapping[str, str]] = None,
    line_width: float = 1.2,
) -> int:
    """Draw ``commands`` onto ``ax`` and return the number of artists added."""

    palette = dict(colors or get_config().colors)
    added = 0
    for command in commands:
        if isinstance(command, Clear):
            ax.cla()
            added = 0
        elif isinstance(command, CircleCmd):
            color = palette[command.style.value]
            ax.add_patch(
                Circle(
                    command.center,
                    command.radius,
                    edgecolor=color,
                    facecolor=color if command.filled else "none",
                    linewidth=line_width,
                )
            )
            added += 1
        elif isinstance(command, SegmentCmd):
            color = palette[command.style.value]
            ax.plot(
                [command.start[0], command.end[0]],
                [command.start[1], command.end[1]],
                color=color,
                linewidth=line_width,
            )
            added += 1
        elif isinstance(command, ErrorCmd):
            if command.at is None:
                logger.debug("Step %d has no drawable part: %s", command.step_id, command.message)
                continue
            ax.add_patch(
                Circle(
                    command.at,
                    _ERROR_MARK_RADIUS,
                    edgecolor=palette[command.style.value],
                    facecolor="none",
                    linestyle="--",
                    linewidth=line_width,
                )
            )
            added += 1
        else:
            raise TypeError(f"unknown draw command {command!r}")
    return added


def save_png(
    commands: Iterable[DrawCommand],
    path: Union[str, Path],
    *,
    width: Optional[float] = None,
    height: Optional[float] = None,
    colors: Optional[Mapping[str, str]] = None,
) -> Path:
    config = get_config()
    width = width if width is not None else config.canvas_width
    height = height if height is not None else config.canvas_height
    output = Path(path)
    output.parent.mkdir(parents=True, exist_ok=True)

    command_list: List[DrawCommand] = list(commands)
    fig, ax = plt.subplots(figsize=(8, 5))
    try:
        draw_commands(ax, command_list, colors=colors or config.colors)
        ax.set_xlim(0.0, width)
        # canvas y grows downwards
        ax.set_ylim(height, 0.0)
        ax.set_aspect("equal")
        fig.savefig(output, dpi=100)
    finally:
        plt.close(fig)
    logger.info("Wrote %d draw command(s) to %s", len(command_list), output)
    return output


__all__ = ["draw_commands", "save_png"]
