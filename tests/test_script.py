import pytest

from refsketch.errors import UnknownId
from refsketch.path import Prop, ReferencePath
from refsketch.script import ScriptError, parse_script, run_script
from refsketch.values import Reference, literal_point


def test_parse_script_reads_events_and_skips_comments():
    script = parse_script(
        """
# scene
point 1 2
line 0 0 4 2   # the base line

infer step[0].self
move 2.5 1.5
click
click 3 4
remove data 0
cancel
"""
    )

    kinds = [event.kind for event in script.events]
    assert kinds == ['point', 'line', 'infer', 'move', 'click', 'click', 'remove', 'cancel']
    assert script.events[0].args == {'x': 1.0, 'y': 2.0}
    assert script.events[1].args == {'start': (0.0, 0.0), 'end': (4.0, 2.0)}
    assert script.events[2].args['slot'] == ReferencePath.step(0, Prop.SELF)
    assert script.events[4].args == {'pos': None}
    assert script.events[5].args == {'pos': (3.0, 4.0)}
    assert script.events[6].args == {'collection': 'data', 'id': 0}
    assert script.events[1].span.line == 4


def test_arity_error_reports_column_pointer():
    text = 'line 0 0 1'
    with pytest.raises(SyntaxError) as excinfo:
        parse_script(text)

    message = str(excinfo.value)
    assert message.startswith('[line 1, col 11] line takes 4 argument(s), got 3')
    lines = message.splitlines()
    assert lines[-2].strip() == text
    assert lines[-1].rstrip().endswith('^')


@pytest.mark.parametrize(
    'text, message_part',
    [
        ('circle 1 2', "unknown event 'circle'"),
        ('point 1 two', "expected NUMBER, got 'two'"),
        ('point 1 2 3', "unexpected '3'"),
        ('remove line 1', "expected 'step' or 'data'"),
        ('remove step x', "expected integer id"),
        ('infer step[0].middle', "unknown property 'middle'"),
        ('set step[0].self', 'set takes 2 argument(s), got 1'),
        ('click 1', 'click takes 0 or 2 argument(s), got 1'),
    ],
)
def test_parse_errors(text, message_part):
    with pytest.raises(SyntaxError) as excinfo:
        parse_script(text)

    assert message_part in str(excinfo.value)


def test_run_script_binds_reference_by_click():
    script = parse_script(
        """
line 0 0 4 2
point 0 0
point 30 30
infer step[2].self
move 2.4 1.2
click
"""
    )

    session, controller = run_script(script)

    assert session.slot_value(ReferencePath.step(2, Prop.SELF)) == Reference(ReferencePath.step(0, Prop.MID))
    assert not controller.is_armed


def test_run_script_edits_and_detaches():
    script = parse_script(
        """
line 0 0 10 0
point 0 0
infer step[1].self
click 10 0
detach step[1].self
set step[0].end.x 20
number 4
set data[0].self 5
"""
    )

    session, _ = run_script(script)

    assert session.slot_value(ReferencePath.step(1, Prop.SELF)) == literal_point(10, 0)
    assert session.resolver().resolve(ReferencePath.step(0, Prop.END)) == (20.0, 0.0)
    assert session.resolver().resolve(ReferencePath.data(0)) == 5.0


def test_run_script_wraps_session_errors_with_location():
    script = parse_script('point 0 0\nremove step 5\n')

    with pytest.raises(ScriptError) as excinfo:
        run_script(script)

    assert str(excinfo.value).startswith('[line 2, col 1] remove:')
    assert excinfo.value.event.kind == 'remove'


def test_dangling_reference_after_removal_resolves_to_unknown_id():
    script = parse_script(
        """
line 0 0 10 0
point 0 0
infer step[1].self
click 10 0
remove step 0
"""
    )

    session, _ = run_script(script)
    drawables = session.execute()

    assert len(drawables) == 1
    assert isinstance(drawables[0].error, UnknownId)
