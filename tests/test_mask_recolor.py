import pytest
from PIL import Image

from helpers import BLACK, CLEAR_BLACK, GRAY, HALF_BLACK, NEAR_WHITE, WHITE, make_icon
from mask_recolor import main, recolor_mask

TARGETS = [(0, 128, 0), (255, 255, 0), (255, 0, 0), (0, 0, 255), (12, 34, 56), (255, 255, 255), (0, 0, 0)]


def test_recolors_black_and_clears_white():
    result = recolor_mask(make_icon(), (0, 128, 0))
    assert list(result.getdata())[:6] == [
        (0, 128, 0, 255),      # opaque black takes the color
        (255, 255, 255, 0),    # opaque white becomes transparent
        CLEAR_BLACK,           # already transparent
        GRAY,
        (0, 128, 0, 100),      # partially transparent black keeps its alpha
        NEAR_WHITE,
    ]


def test_keeps_size_and_mode():
    icon = make_icon(width=2)
    result = recolor_mask(icon, (1, 2, 3))
    assert result.size == icon.size
    assert result.mode == 'RGBA'


def test_does_not_mutate_input():
    icon = make_icon()
    before = icon.tobytes()
    recolor_mask(icon, (255, 0, 0))
    recolor_mask(icon, (0, 0, 255))
    assert icon.tobytes() == before


def test_same_input_gives_identical_output():
    icon = make_icon()
    assert recolor_mask(icon, (12, 34, 56)).tobytes() == recolor_mask(icon, (12, 34, 56)).tobytes()


@pytest.mark.parametrize('rgb', TARGETS)
def test_other_pixels_pass_through_for_any_color(rgb):
    untouched = [CLEAR_BLACK, GRAY, NEAR_WHITE, (255, 255, 255, 0), (1, 0, 0, 255), (200, 10, 40, 7)]
    result = recolor_mask(make_icon(untouched), rgb)
    assert list(result.getdata())[:len(untouched)] == untouched


def test_white_target_on_black_is_not_cleared_again():
    result = recolor_mask(make_icon([BLACK, WHITE], width=2), (255, 255, 255))
    assert list(result.getdata()) == [(255, 255, 255, 255), (255, 255, 255, 0)]


def test_non_rgba_input_is_converted():
    img = Image.new('L', (2, 1))
    img.putdata([0, 255])
    result = recolor_mask(img, (9, 8, 7))
    assert list(result.getdata()) == [(9, 8, 7, 255), (255, 255, 255, 0)]
    assert img.mode == 'L'


@pytest.mark.parametrize('rgb', [(256, 0, 0), (0, -1, 0), (1, 2)])
def test_rejects_out_of_range_color(rgb):
    with pytest.raises(ValueError):
        recolor_mask(make_icon(), rgb)


def test_script_writes_recolored_file(tmp_path):
    src = tmp_path / 'icon.png'
    make_icon([BLACK, WHITE, HALF_BLACK], width=3).save(src)
    out = tmp_path / 'out' / 'icon.png'

    assert main(['--input', str(src), '--output', str(out), '--color', 'red:#ff0000']) == 0
    with Image.open(out) as img:
        assert list(img.convert('RGBA').getdata()) == [(255, 0, 0, 255), (255, 255, 255, 0), (255, 0, 0, 100)]


def test_script_rejects_bad_color(tmp_path):
    src = tmp_path / 'icon.png'
    make_icon().save(src)
    assert main(['--input', str(src), '--output', str(tmp_path / 'o.png'), '--color', 'red:ff00']) == 2
