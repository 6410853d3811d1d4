import pytest

from darkmode.color.color_model import Color, hsl_to_rgb, parse_color, perceived_brightness, rgb_to_hsl
from darkmode.errors import ColorParseError


@pytest.mark.parametrize(
    "text,expected",
    [
        ("#fff", (255, 255, 255, 1.0)),
        ("#FF0000", (255, 0, 0, 1.0)),
        ("red", (255, 0, 0, 1.0)),
        ("WindowText", (0, 0, 0, 1.0)),
        ("rgb(10, 20, 30)", (10, 20, 30, 1.0)),
        ("rgba(10, 20, 30, 0.5)", (10, 20, 30, 0.5)),
        ("rgb(10 20 30 / 50%)", (10, 20, 30, 0.5)),
        ("rgb(100%, 0%, 0%)", (255, 0, 0, 1.0)),
        ("transparent", (0, 0, 0, 0.0)),
    ],
)
def test_parse_color_forms(text, expected):
    c = parse_color(text)
    assert (c.r, c.g, c.b, c.alpha) == pytest.approx(expected)


def test_parse_hex_with_alpha():
    c = parse_color("#ff000080")
    assert c.alpha == pytest.approx(128 / 255)


def test_parse_hsl():
    c = parse_color("hsl(120, 100%, 50%)")
    assert c.rgb == pytest.approx((0, 255, 0))
    c2 = parse_color("hsla(0.5turn 100% 50% / 0.25)")
    assert c2.rgb == pytest.approx((0, 255, 255))
    assert c2.alpha == pytest.approx(0.25)


@pytest.mark.parametrize("bad", ["", "notacolor", "#12", "rgb(1, 2)", "rgb(a, b, c)"])
def test_parse_color_rejects_garbage(bad):
    with pytest.raises(ColorParseError):
        parse_color(bad)


def test_color_parse_error_is_value_error():
    with pytest.raises(ValueError):
        parse_color("nope")


def test_to_css_formats():
    assert Color(255, 0, 0).to_css() == "rgb(255, 0, 0)"
    assert Color(255, 0, 0, 0.5).to_css() == "rgba(255, 0, 0, 0.5)"
    assert Color(10.4, 10.6, 0).to_css() == "rgb(10, 11, 0)"
    assert str(Color(1, 2, 3)) == "rgb(1, 2, 3)"


def test_from_rgb_clamps():
    c = Color.from_rgb(300, -5, 10, 2)
    assert (c.r, c.g, c.b, c.alpha) == (255, 0, 10, 1)


def test_rgb_hsl_conversion():
    assert rgb_to_hsl(255, 0, 0) == pytest.approx((0, 100, 50))
    assert rgb_to_hsl(128, 128, 128)[1] == 0
    assert hsl_to_rgb(240, 100, 50) == pytest.approx((0, 0, 255))
    assert hsl_to_rgb(0, 0, 120) == pytest.approx((255, 255, 255))


def test_perceived_brightness():
    assert perceived_brightness(255, 255, 255) == pytest.approx(255)
    assert perceived_brightness(0, 0, 0) == 0
    assert Color(25, 25, 25).brightness == pytest.approx(25)


def test_achromatic_detection():
    assert Color(200, 200, 200).is_achromatic()
    assert not Color(200, 10, 10).is_achromatic()


def test_with_lightness_keeps_alpha():
    c = Color(255, 255, 255, 0.3).with_lightness(14)
    assert c.lightness == pytest.approx(14)
    assert c.alpha == pytest.approx(0.3)


def test_mix_even_weights():
    mixed = Color(255, 0, 0).mix(Color(0, 0, 255))
    assert mixed.rgb == pytest.approx((127.5, 0, 127.5))
    assert mixed.alpha == 1


def test_mix_translucent_other_pulls_less():
    mixed = Color(255, 255, 255).mix(Color(0, 0, 0, 0.2))
    assert mixed.r > 127.5
    assert mixed.alpha == pytest.approx(0.6)


def test_composite_over():
    out = Color(0, 0, 0, 0.5).composite_over(Color(255, 255, 255))
    assert out.rgb == pytest.approx((127.5, 127.5, 127.5))
    assert out.alpha == 1
    assert Color(0, 0, 0, 0).composite_over(Color(0, 0, 0, 0)).alpha == 0
