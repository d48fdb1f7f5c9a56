from refsketch.path import Prop, ReferencePath
from refsketch.session import Session
from refsketch.snap import SnapIndex, SnapPoint, nearest
from refsketch.model import Step
from refsketch.resolve import Resolver
from refsketch.values import Reference


def test_index_counts_anchors_per_kind():
    session = Session()
    assert session.snap_paths() == ()

    session.add_line(0, 0, 10, 0)
    assert len(session.snap_paths()) == 3

    session.add_point(5, 5)
    paths = session.snap_paths()
    assert len(paths) == 4
    assert paths == (
        ReferencePath.step(0, Prop.START),
        ReferencePath.step(0, Prop.MID),
        ReferencePath.step(0, Prop.END),
        ReferencePath.step(1, Prop.SELF),
    )


def test_data_and_value_edits_keep_the_cached_index():
    session = Session()
    session.add_line(0, 0, 10, 0)
    session.add_point(1, 1)
    before = session.snap_paths()
    rebuilt = session.snap_index.recomputations

    session.add_number(3.0)
    session.add_point_data(1, 2)
    session.edit_number(ReferencePath.step(0, Prop.END, Prop.X), 20)
    session.set_slot(ReferencePath.step(1, Prop.SELF), Reference(ReferencePath.step(0, Prop.MID)))

    assert session.snap_paths() is before
    assert session.snap_index.recomputations == rebuilt


def test_structural_changes_rebuild_the_index():
    session = Session()
    session.add_point()
    session.snap_paths()
    rebuilt = session.snap_index.recomputations

    session.add_line()
    assert len(session.snap_paths()) == 4
    session.remove_step(0)
    assert len(session.snap_paths()) == 3
    assert session.snap_index.recomputations == rebuilt + 2


def test_resolved_skips_unresolvable_anchors():
    index = SnapIndex()
    good = Step.draw_point(0)
    bad = Step.draw_point(1, Reference(ReferencePath.step(7, Prop.SELF)))
    steps = [good, bad]

    points = index.resolved(Resolver(steps), steps)

    assert points == [SnapPoint(ReferencePath.step(0, Prop.SELF), (0.0, 0.0))]
    assert len(index) == 2


def _snap(step_id, coord):
    return SnapPoint(ReferencePath.step(step_id, Prop.SELF), coord)


def test_nearest_prefers_closest_point_over_iteration_order():
    points = [_snap(0, (3.0, 0.0)), _snap(1, (0.0, 0.0))]

    hit = nearest((2.0, 0.0), points, 5.0)

    assert hit.point == points[0]
    assert hit.distance == 1.0


def test_nearest_breaks_exact_ties_by_index_order():
    points = [_snap(0, (1.0, 0.0)), _snap(1, (-1.0, 0.0))]

    assert nearest((0.0, 0.0), points, 5.0).point == points[0]


def test_nearest_threshold_is_strict():
    points = [_snap(0, (5.0, 0.0))]

    assert nearest((0.0, 0.0), points, 5.0) is None
    assert nearest((0.01, 0.0), points, 5.0) is not None
    assert nearest((0.0, 0.0), [], 5.0) is None
