import pytest

from refsketch.backends.tikz import generate_tikz_code, generate_tikz_document
from refsketch.render import CircleCmd, Clear, ErrorCmd, SegmentCmd, Style


def test_segment_and_circle_flip_y_axis():
    code = generate_tikz_code(
        [
            Clear(),
            SegmentCmd((0.0, 0.0), (10.0, 5.0)),
            CircleCmd((2.0, 1.0), 0.8),
        ]
    )

    lines = code.splitlines()
    assert lines[0] == '\\begin{tikzpicture}[scale=0.1]'
    assert '  \\draw[rs/normal] (0, 0) -- (10, -5);' in lines
    assert '  \\draw[rs/normal] (2, -1) circle (0.8);' in lines
    assert lines[-1] == '\\end{tikzpicture}'


def test_filled_selected_marker_uses_palette_colour():
    code = generate_tikz_code(
        [CircleCmd((2.0, 1.0), 1.2, Style.SELECTED, filled=True)],
        colors={'normal': 'black', 'available': 'blue', 'selected': 'green', 'error': 'red'},
    )

    assert '\\filldraw[rs/selected, fill=green] (2, -1) circle (1.2);' in code


def test_clear_discards_earlier_commands():
    code = generate_tikz_code([SegmentCmd((0.0, 0.0), (1.0, 1.0)), Clear(), CircleCmd((3.0, 3.0), 1.0)])

    assert '--' not in code
    assert 'circle (1)' in code


def test_error_commands_render_as_comment_and_dashed_mark():
    code = generate_tikz_code(
        [
            ErrorCmd(3, 'no step with id 0\n(while resolving step[0].end)'),
            ErrorCmd(4, 'cycle', (1.5, 2.0)),
        ]
    )

    assert '% step 3: no step with id 0 (while resolving step[0].end)' in code
    assert '\\draw[rs/error] (1.5, -2) circle (1.6);' in code


def test_non_finite_coordinates_are_rejected():
    with pytest.raises(ValueError):
        generate_tikz_code([CircleCmd((float('nan'), 0.0), 1.0)])


def test_document_wraps_picture():
    document = generate_tikz_document([CircleCmd((0.0, 0.0), 1.0)])

    assert document.startswith('\\documentclass[border=2pt]{standalone}')
    assert 'rs/error/.style={draw=red' in document
    assert '\\begin{tikzpicture}' in document
    assert document.rstrip().endswith('\\end{document}')


def test_matplotlib_backend_writes_png(tmp_path):
    pytest.importorskip('matplotlib')
    from refsketch.backends.mpl import draw_commands, save_png

    commands = [
        Clear(),
        SegmentCmd((0.0, 0.0), (10.0, 5.0)),
        CircleCmd((10.0, 5.0), 1.2, Style.SELECTED, filled=True),
        ErrorCmd(2, 'dangling', (3.0, 3.0)),
        ErrorCmd(3, 'dangling'),
    ]
    output = save_png(commands, tmp_path / 'out' / 'frame.png')

    assert output.exists()
    assert output.read_bytes()[:8] == b'\x89PNG\r\n\x1a\n'

    import matplotlib.pyplot as plt

    fig, ax = plt.subplots()
    try:
        assert draw_commands(ax, commands) == 3
    finally:
        plt.close(fig)


def test_save_png_uses_given_palette(tmp_path, monkeypatch):
    pytest.importorskip('matplotlib')
    from refsketch.backends import mpl

    seen = []
    real_draw = mpl.draw_commands

    def recording_draw(ax, commands, *, colors=None, line_width=1.2):
        seen.append(dict(colors))
        return real_draw(ax, commands, colors=colors, line_width=line_width)

    monkeypatch.setattr(mpl, 'draw_commands', recording_draw)
    palette = {'normal': 'teal', 'available': 'navy', 'selected': 'gold', 'error': 'magenta'}

    mpl.save_png([CircleCmd((1.0, 1.0), 1.0)], tmp_path / 'frame.png', colors=palette)

    assert seen == [palette]
