import pytest

from darkmode.color.css_syntax import (
    find_colors,
    has_url,
    is_gradient,
    normalize_colors,
    replace_colors,
    strip_important,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("red", "rgb(255, 0, 0)"),
        ("1px solid red", "1px solid rgb(255, 0, 0)"),
        ("darkred", "rgb(139, 0, 0)"),
        ("#0f0", "rgb(0, 255, 0)"),
        ("#00000080", "rgba(0, 0, 0, 0.502)"),
        ("hsl(0, 100%, 50%)", "rgb(255, 0, 0)"),
        ("rgb(1, 2, 3)", "rgb(1, 2, 3)"),
        ("transparent", "transparent"),
    ],
)
def test_normalize_colors(value, expected):
    assert normalize_colors(value) == expected


def test_normalize_leaves_urls_alone():
    value = "url(images/red.png) no-repeat white"
    assert normalize_colors(value) == "url(images/red.png) no-repeat rgb(255, 255, 255)"
    assert normalize_colors("url(#fff)") == "url(#fff)"


def test_gradient_stops_normalized():
    out = normalize_colors("linear-gradient(to right, red, blue)")
    assert out == "linear-gradient(to right, rgb(255, 0, 0), rgb(0, 0, 255))"


def test_strip_important():
    assert strip_important("red !important") == ("red", True)
    assert strip_important("red ! IMPORTANT") == ("red", True)
    assert strip_important("red") == ("red", False)


def test_find_and_replace_colors():
    value = "linear-gradient(rgb(1, 2, 3), rgba(4, 5, 6, 0.5)) url(rgb(9, 9, 9).png)"
    assert find_colors(value) == ["rgb(1, 2, 3)", "rgba(4, 5, 6, 0.5)"]
    replaced = replace_colors(value, lambda lit: "X")
    assert replaced == "linear-gradient(X, X) url(rgb(9, 9, 9).png)"


def test_url_and_gradient_detection():
    assert has_url("url(a.png)")
    assert not has_url("red")
    assert is_gradient("radial-gradient(red, blue)")
    assert not is_gradient("rgb(1, 2, 3)")


def test_gradient_detection_ignores_url_contents():
    assert not is_gradient("url(gradient.png)")
    assert not is_gradient("url(img/linear-gradient(1).png) no-repeat")
    assert is_gradient("url(a.png), linear-gradient(red, blue)")
