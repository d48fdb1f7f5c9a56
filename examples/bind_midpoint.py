"""Example: bind a point to the midpoint of a line and watch it follow edits."""

from refsketch import InferController, Session, render
from refsketch.backends import generate_tikz_code
from refsketch.path import Prop, ReferencePath


def main() -> None:
    session = Session()
    line_id = session.add_line(0, 0, 40, 20).id
    point_id = session.add_point(5, 30).id

    controller = InferController(session)
    controller.arm(ReferencePath.step(point_id, Prop.SELF))
    controller.pointer_moved((19.0, 11.0))
    print("hover:", controller.hover.value.describe())
    controller.pointer_down()

    resolver = session.resolver()
    print("bound point:", resolver.resolve(ReferencePath.step(point_id, Prop.SELF)))

    session.edit_number(ReferencePath.step(line_id, Prop.END, Prop.X), 60)
    resolver = session.resolver()
    print("after edit:", resolver.resolve(ReferencePath.step(point_id, Prop.SELF)))

    print(generate_tikz_code(render(session, controller)))


if __name__ == "__main__":
    main()
