from darkmode.dom.element import Element, Rect
from darkmode.engine.layers import PendingLayerStack, TextElementQueue
from darkmode.utils.naming import ClassNameSequence


def _box(top, bottom, left=0, right=100):
    return Rect(top=top, left=left, bottom=bottom, right=right)


def test_push_tags_element_newest_first():
    stack = PendingLayerStack()
    a, b = Element("div", rect=_box(0, 10)), Element("div", rect=_box(20, 30))
    first = stack.push(a, "x: 1 !important;")
    second = stack.push(b, "y: 2 !important;")
    assert first.class_name == "js_darkmode__bg__0"
    assert second.class_name == "js_darkmode__bg__1"
    assert a.classes == ["js_darkmode__bg__0"]
    assert [layer.class_name for layer in stack] == ["js_darkmode__bg__1", "js_darkmode__bg__0"]


def test_resolve_consumes_overlapping_layers_once():
    stack = PendingLayerStack(ClassNameSequence("bg_"))
    stack.push(Element("div", rect=_box(0, 100)), "a")
    stack.push(Element("div", rect=_box(200, 300)), "b")
    seen = []
    text = Element("p", text="hi", rect=_box(50, 60))
    assert stack.resolve(text, seen.append) == 1
    assert [layer.css_kv for layer in seen] == ["a"]
    assert stack.resolve(text, seen.append) == 0
    assert len(stack) == 1


def test_touching_rectangles_do_not_match():
    stack = PendingLayerStack()
    stack.push(Element("div", rect=_box(0, 100)), "a")
    assert stack.resolve(Element("p", rect=_box(100, 120)), lambda layer: None) == 0


def test_rect_cached_until_update():
    calls = []

    def provider(el):
        calls.append(el)
        return _box(0, 10)

    el = Element("div", rect_provider=provider)
    stack = PendingLayerStack()
    stack.push(el, "a")
    probe = Element("p", rect=_box(100, 110))
    stack.resolve(probe, lambda layer: None)
    stack.resolve(probe, lambda layer: None)
    assert len(calls) == 1
    stack.update([el])
    stack.resolve(probe, lambda layer: None)
    assert len(calls) == 2


def test_clear():
    stack = PendingLayerStack()
    stack.push(Element("div"), "a")
    stack.clear()
    assert len(stack) == 0


def test_text_queue_drain_and_update():
    q = TextElementQueue()
    a, b = Element("p"), Element("p")
    q.push(a)
    q.push(b)
    q.update([b])
    assert len(q) == 1
    drained = []
    assert q.drain(drained.append) == 1
    assert drained == [b]
    assert len(q) == 0
