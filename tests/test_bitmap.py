import pytest

from lora_igate.bitmap import Bitmap
from lora_igate.font import FontDesc


def _font():
    widths = bytes([2, 1, 3])
    glyphs = bytes([0x01, 0x80, 0xFF, 0x0F, 0x00, 0xF0])
    return FontDesc(5, 8, first_char=ord("?"), last_char=ord("A"), data=widths + glyphs)


def _lit(bitmap):
    return {
        (x, y)
        for x in range(bitmap.width)
        for y in range(bitmap.height)
        if bitmap.get_pixel(x, y)
    }


def test_pixel_set_get_clear():
    bmp = Bitmap(16, 16)
    bmp.set_pixel(4, 5)
    assert bmp.get_pixel(4, 5) is True
    bmp.clear_pixel(4, 5)
    assert bmp.get_pixel(4, 5) is False


def test_buffer_layout_is_paged():
    bmp = Bitmap(16, 16)
    bmp.set_pixel(3, 9)
    assert bmp.buffer[3 + 16] == 0x02
    assert sum(bmp.buffer) == 0x02


def test_out_of_range_pixels_are_ignored():
    bmp = Bitmap(16, 16)
    bmp.set_pixel(-1, 0)
    bmp.set_pixel(16, 0)
    bmp.set_pixel(0, 16)
    assert _lit(bmp) == set()
    assert bmp.get_pixel(100, 100) is False


def test_height_must_be_multiple_of_eight():
    with pytest.raises(ValueError):
        Bitmap(16, 10)


def test_clear_removes_everything():
    bmp = Bitmap(16, 16)
    bmp.fill_rect(0, 0, 16, 16)
    bmp.clear()
    assert bmp.buffer == bytes(len(bmp.buffer))


def test_draw_line_diagonal():
    bmp = Bitmap(16, 16)
    bmp.draw_line(0, 0, 7, 7)
    assert _lit(bmp) == {(i, i) for i in range(8)}


def test_draw_line_reverse_matches_endpoints():
    bmp = Bitmap(32, 16)
    bmp.draw_line(20, 10, 2, 3)
    lit = _lit(bmp)
    assert (20, 10) in lit and (2, 3) in lit


def test_horizontal_line_off_screen_draws_nothing():
    bmp = Bitmap(16, 16)
    bmp.draw_horizontal_line(0, 16, 5)
    bmp.draw_vertical_line(-1, 0, 5)
    assert _lit(bmp) == set()


def test_draw_rect_border_only():
    bmp = Bitmap(16, 16)
    bmp.draw_rect(2, 2, 5, 4)
    lit = _lit(bmp)
    assert {(2, 2), (6, 2), (2, 5), (6, 5)} <= lit
    assert (3, 3) not in lit


def test_fill_rect_covers_area_exactly():
    bmp = Bitmap(16, 16)
    bmp.fill_rect(1, 2, 4, 3)
    assert _lit(bmp) == {(x, y) for x in range(1, 5) for y in range(2, 5)}


def test_draw_circle_is_symmetric():
    bmp = Bitmap(32, 32)
    bmp.draw_circle(16, 16, 5)
    lit = _lit(bmp)
    assert (21, 16) in lit and (16, 11) in lit
    assert (16, 16) not in lit
    assert all((32 - x, y) in lit for x, y in lit)
    assert all((x, 32 - y) in lit for x, y in lit)


def test_fill_circle_includes_center_line():
    bmp = Bitmap(32, 32)
    bmp.fill_circle(16, 16, 5)
    lit = _lit(bmp)
    assert (16, 16) in lit
    assert (11, 16) in lit


def test_circle_quad_one_is_upper_right():
    bmp = Bitmap(32, 32)
    bmp.draw_circle_quads(16, 16, 6, 0x1)
    lit = _lit(bmp)
    assert lit
    assert all(x >= 16 and y <= 16 for x, y in lit)


def test_progress_bar_grows_with_progress():
    empty = Bitmap(64, 16)
    empty.draw_progress_bar(0, 0, 60, 10, 0)
    full = Bitmap(64, 16)
    full.draw_progress_bar(0, 0, 60, 10, 100)
    assert _lit(empty) < _lit(full)


def test_draw_char_renders_glyph_columns():
    bmp = Bitmap(16, 16, _font())
    assert bmp.draw_char(0, 0, "A") == 5
    lit = _lit(bmp)
    assert {(0, r) for r in range(4)} <= lit
    assert {(2, r) for r in range(4, 8)} <= lit
    assert (1, 0) not in lit and (0, 4) not in lit


def test_draw_char_clears_background():
    bmp = Bitmap(16, 16, _font())
    bmp.set_pixel(1, 3)
    bmp.draw_char(0, 0, "A")
    assert bmp.get_pixel(1, 3) is False


def test_space_advances_without_drawing():
    bmp = Bitmap(16, 16, _font())
    assert bmp.draw_char(3, 0, " ") == 5
    assert _lit(bmp) == set()


def test_unknown_char_draws_question_mark():
    unknown = Bitmap(16, 16, _font())
    question = Bitmap(16, 16, _font())
    assert unknown.draw_char(0, 0, "Z") == question.draw_char(0, 0, "?")
    assert unknown.buffer == question.buffer


def test_draw_string_chains_characters():
    text = Bitmap(32, 16, _font())
    chars = Bitmap(32, 16, _font())
    end = text.draw_string(1, 0, "A?")
    assert end == chars.draw_char(chars.draw_char(1, 0, "A"), 0, "?")
    assert text.buffer == chars.buffer


def test_draw_string_lf_wraps():
    wrapped = Bitmap(16, 16, _font())
    end = wrapped.draw_string_lf(0, 0, "AAAA")
    single = Bitmap(16, 16, _font())
    assert end == single.draw_char(0, 8, "A")
    assert wrapped.get_pixel(0, 8) is True


def test_text_without_font_raises():
    with pytest.raises(ValueError):
        Bitmap(16, 16).draw_string(0, 0, "A")