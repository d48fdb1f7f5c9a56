from refsketch.config import SketchConfig
from refsketch.infer import InferController
from refsketch.path import Prop, ReferencePath
from refsketch.render import CircleCmd, Clear, ErrorCmd, SegmentCmd, Style, render
from refsketch.session import Session
from refsketch.values import Reference


def markers(commands, radius=1.2):
    return [cmd for cmd in commands if isinstance(cmd, CircleCmd) and cmd.radius == radius]


def test_idle_frame_draws_primitives_and_neutral_markers():
    session = Session()
    session.add_line(0, 0, 10, 0)
    session.add_point(5, 5)

    commands = render(session)

    assert commands[0] == Clear()
    assert SegmentCmd((0.0, 0.0), (10.0, 0.0)) in commands
    assert CircleCmd((5.0, 5.0), 0.8) in commands
    snap = markers(commands)
    assert [cmd.center for cmd in snap] == [(0.0, 0.0), (5.0, 0.0), (10.0, 0.0), (5.0, 5.0)]
    assert {cmd.style for cmd in snap} == {Style.NORMAL}


def test_armed_frame_highlights_candidates_and_hover():
    session = Session()
    session.add_line(0, 0, 10, 0)
    session.add_point(30, 30)
    controller = InferController(session)
    controller.arm(ReferencePath.step(1, Prop.SELF))
    controller.pointer_moved((9, 1))

    commands = render(session, controller)

    available = [cmd for cmd in commands if isinstance(cmd, CircleCmd) and cmd.style is Style.AVAILABLE]
    selected = [cmd for cmd in commands if isinstance(cmd, CircleCmd) and cmd.style is Style.SELECTED]
    assert len(available) == 4
    assert selected == [CircleCmd((10.0, 0.0), 1.2, Style.SELECTED, filled=True)]


def test_free_hover_is_drawn_unfilled():
    session = Session()
    session.add_point()
    session.add_point(40, 40)
    controller = InferController(session)
    controller.arm(ReferencePath.step(0, Prop.SELF))
    controller.pointer_moved((20, 20))

    commands = render(session, controller)

    assert commands[-1] == CircleCmd((20.0, 20.0), 1.2, Style.SELECTED, filled=False)


def test_dangling_reference_does_not_abort_the_frame():
    session = Session()
    session.add_line(0, 0, 10, 0)  # B
    session.add_point(3, 3)
    session.add_point()  # A
    session.set_slot(ReferencePath.step(2, Prop.SELF), Reference(ReferencePath.step(0, Prop.END)))
    session.remove_step(0)

    commands = render(session)

    errors = [cmd for cmd in commands if isinstance(cmd, ErrorCmd)]
    assert len(errors) == 1
    assert errors[0].step_id == 2
    assert errors[0].at is None
    assert 'no step with id 0' in errors[0].message
    assert CircleCmd((3.0, 3.0), 0.8) in commands
    assert [cmd.center for cmd in markers(commands)] == [(3.0, 3.0)]


def test_partially_resolvable_line_marks_its_resolvable_end():
    session = Session()
    session.add_point()
    session.add_line(1, 2, 0, 0)
    session.set_slot(ReferencePath.step(1, Prop.END), Reference(ReferencePath.step(0, Prop.SELF)))
    session.remove_step(0)

    commands = render(session)

    assert ErrorCmd(1, commands[1].message, (1.0, 2.0)) == commands[1]


def test_radii_follow_session_config():
    session = Session(SketchConfig(point_radius=2.0, marker_radius=3.0))
    session.add_point(1, 1)

    commands = render(session)

    assert commands[1:] == [CircleCmd((1.0, 1.0), 2.0), CircleCmd((1.0, 1.0), 3.0)]


def test_removing_armed_step_keeps_frame_drawable():
    session = Session()
    session.add_point(1, 1)
    line = session.add_line(0, 0, 10, 0)
    controller = InferController(session)
    controller.arm(ReferencePath.step(line.id, Prop.START))
    controller.pointer_moved((1.0, 1.0))

    session.remove_step(line.id)
    commands = render(session, controller)

    assert commands == [Clear(), CircleCmd((1.0, 1.0), 0.8), CircleCmd((1.0, 1.0), 1.2)]
    assert not controller.is_armed
