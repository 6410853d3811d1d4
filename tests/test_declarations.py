from darkmode.dom.element import Element, InlineStyle
from darkmode.engine.brightness import Role
from darkmode.engine.declarations import extract_declarations, table_background_color


def _el(tag="div", style="", **kw):
    return Element(tag, style=InlineStyle.parse(style), **kw)


def test_order_color_last_and_image_after_background():
    out = extract_declarations(
        _el(style="color: red; background-image: url(x.png); border-color: blue; background-color: white")
    )
    assert [d.name for d in out.declarations] == [
        "border-color",
        "background-color",
        "background-image",
        "color",
    ]
    assert [d.role for d in out.declarations] == [Role.BORDER, Role.BACKGROUND, Role.BACKGROUND, Role.TEXT]


def test_flags_and_layer_alignment_values():
    out = extract_declarations(
        _el(style="background: url(a.png) no-repeat; background-position: center; background-size: cover")
    )
    assert out.has_inline_background
    assert out.has_inline_background_image
    assert not out.has_inline_color
    assert out.background_position == "center"
    assert out.background_size == "cover"
    # position / size are captured but not processed as colors
    assert [d.name for d in out.declarations] == ["background"]


def test_border_image_counts_as_background_image():
    out = extract_declarations(_el(style="border-image: url(b.png) 30 round"))
    assert out.has_inline_background_image
    assert not out.has_inline_background


def test_unrelated_properties_are_skipped():
    out = extract_declarations(_el(style="font-size: 12px; margin: 0"))
    assert out.declarations == []


def test_duplicates_keep_last_value_and_important():
    out = extract_declarations(_el(style="color: red; color: blue !important"))
    assert len(out.declarations) == 1
    decl = out.declarations[0]
    assert decl.value == "blue"
    assert decl.important
    assert decl.raw_value == "blue !important"


def test_table_bgcolor_attribute():
    out = extract_declarations(_el("td", attributes={"bgcolor": "#ffffff"}))
    assert out.declarations[0].name == "background-color"
    assert out.declarations[0].value == "rgb(255, 255, 255)"
    assert out.has_inline_background


def test_table_editor_class_color_wins_over_bgcolor():
    el = _el("tr", classes=["ue-table-interlace-color-double"], attributes={"bgcolor": "red"})
    assert table_background_color(el) == "rgb(247, 250, 255)"


def test_table_inline_background_not_overridden():
    out = extract_declarations(_el("table", style="background-color: #000", attributes={"bgcolor": "#fff"}))
    assert [d.value for d in out.declarations] == ["#000"]


def test_unparseable_bgcolor_ignored():
    assert table_background_color(_el("td", attributes={"bgcolor": "not-a-color"})) is None
    assert table_background_color(_el("div")) is None


def test_data_uri_background_image_detected():
    out = extract_declarations(_el(style="background-image: url(data:image/png;base64,AAAA); color:#333"))
    assert out.has_inline_background_image
    assert out.has_inline_color
    assert [d.name for d in out.declarations] == ["background-image", "color"]
