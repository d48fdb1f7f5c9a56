import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from refsketch import (
    InferController,
    ScriptError,
    Session,
    get_config,
    parse_script,
    render,
    run_script,
)
from refsketch.backends import generate_tikz_document, save_png
from refsketch.errors import ResolutionError
from refsketch.model import SLOT_PROPS

logger = logging.getLogger(__name__)


def _configure_logging(level: str) -> None:
    log_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=log_level,
        format="%(levelname)s:%(name)s:%(message)s",
    )


def _print_scene(session: Session, controller: InferController) -> None:
    resolver = session.resolver()
    drawables = {drawable.step_id: drawable for drawable in session.execute()}

    print("Steps:")
    if not session.steps:
        print("  (none)")
    for step in session.steps:
        drawable = drawables[step.id]
        print(f"  #{step.id} {step.describe()}")
        for prop in SLOT_PROPS[step.kind]:
            print(f"    {prop.value}: {step.slot(prop).describe()}")
        if drawable.ok:
            coords = ", ".join(f"({x:.6f}, {y:.6f})" for x, y in drawable.geometry or ())
            print(f"    resolved: {coords}")
        else:
            print(f"    error: {drawable.error}")

    print("Data:")
    if not session.data:
        print("  (none)")
    for item in session.data:
        try:
            rendered = f"{item.value.resolve(resolver)}"
        except ResolutionError as exc:
            rendered = f"error: {exc}"
        print(f"  #{item.id} {item.describe()}: {item.value.describe()} = {rendered}")

    print("Snap points:")
    for point in session.snap_points(resolver):
        print(f"  {point.path.describe()}: ({point.coord[0]:.6f}, {point.coord[1]:.6f})")

    controller.drop_stale_target()
    if controller.is_armed:
        print(f"Infer: armed on {controller.target.describe()}")  # type: ignore[union-attr]
        hover = controller.hit_test(resolver)
        if hover is not None:
            print(f"  hover: {hover.value.describe()}")
    else:
        print("Infer: idle")


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Replay a refsketch event script")
    parser.add_argument("path", help="Path to the event script")
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (default: INFO)",
    )
    parser.add_argument(
        "--threshold",
        type=float,
        help="Snap hit threshold in logical units (default: 5)",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        help="Maximum reference chain depth before a cycle is reported (default: 64)",
    )
    parser.add_argument(
        "--tikz-output-path",
        help="Write a standalone TikZ document of the final frame to the given path",
    )
    parser.add_argument(
        "--png-output-path",
        help="Write a PNG of the final frame to the given path",
    )
    args = parser.parse_args(argv)

    _configure_logging(args.log_level)

    config = get_config()
    if args.threshold is not None:
        config.hit_threshold = args.threshold
    if args.max_depth is not None:
        config.max_depth = args.max_depth

    with open(args.path) as fin:
        text = fin.read()

    logger.info("Parsing event script from %s", args.path)
    try:
        script = parse_script(text)
    except SyntaxError as exc:
        logger.error("Invalid script:\n%s", exc)
        raise SystemExit(1)
    logger.info("Parsed %d event(s)", len(script.events))

    session = Session(config)
    controller = InferController(session)
    try:
        run_script(script, session, controller)
    except ScriptError as exc:
        logger.error("Script failed: %s", exc)
        raise SystemExit(1)

    _print_scene(session, controller)
    commands = render(session, controller)

    if args.tikz_output_path:
        output_path = Path(args.tikz_output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Writing TikZ document to %s", output_path)
        output_path.write_text(generate_tikz_document(commands, colors=config.colors), encoding="utf-8")
        print(f"TikZ document written to {output_path}")

    if args.png_output_path:
        png_path = save_png(
            commands,
            args.png_output_path,
            width=config.canvas_width,
            height=config.canvas_height,
            colors=config.colors,
        )
        print(f"PNG written to {png_path}")


if __name__ == "__main__":
    main(sys.argv[1:])
