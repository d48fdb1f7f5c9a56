"""Configuration shared by the resolver, hit-testing and rendering."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Dict


@dataclass
class SketchConfig:
    # Logical units; the canvas is 80 x 50 (8:5 aspect).
    hit_threshold: float = 5.0
    max_depth: int = 64
    point_radius: float = 0.8
    marker_radius: float = 1.2
    line_width: float = 0.25
    canvas_width: float = 80.0
    canvas_height: float = 50.0
    colors: Dict[str, str] = field(
        default_factory=lambda: {
            "normal": "black",
            "available": "blue",
            "selected": "orange",
            "error": "red",
        }
    )


_SKETCH_CONFIG = SketchConfig()


def get_config() -> SketchConfig:
    return copy.deepcopy(_SKETCH_CONFIG)


def set_config(config: SketchConfig) -> None:
    global _SKETCH_CONFIG
    _SKETCH_CONFIG = copy.deepcopy(config)


__all__ = ["SketchConfig", "get_config", "set_config"]
