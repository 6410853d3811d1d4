from darkmode.dom.element import Element
from darkmode.utils.naming import ClassNameSequence, strip_scoped_classes


def test_sequence_is_monotonic_until_reset():
    seq = ClassNameSequence()
    names = [seq.next() for _ in range(3)]
    assert names == ["js_darkmode__0", "js_darkmode__1", "js_darkmode__2"]
    assert seq.peek() == 3
    seq.reset()
    assert seq.next() == "js_darkmode__0"


def test_sequences_are_independent():
    a = ClassNameSequence()
    b = ClassNameSequence("x_", start=5)
    a.next()
    assert b.next() == "x_5"
    assert b.prefix == "x_"
    assert a.next() == "js_darkmode__1"


def test_strip_scoped_classes():
    el = Element("p", classes=["lead", "js_darkmode__4", "js_darkmode__bg__1"])
    removed = strip_scoped_classes(el)
    assert removed == ["js_darkmode__4", "js_darkmode__bg__1"]
    assert el.classes == ["lead"]
