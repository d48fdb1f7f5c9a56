"""Draw-command consumers: TikZ documents and matplotlib figures."""

from .tikz import generate_tikz_code, generate_tikz_document
from .mpl import draw_commands, save_png

__all__ = [
    "generate_tikz_code",
    "generate_tikz_document",
    "draw_commands",
    "save_png",
]
