import pytest

from darkmode.config import DarkmodeConfig
from darkmode.engine.scheduler import ConversionScheduler, Position
from darkmode.errors import ConversionError

WHITE_BG = "background-color: #fff"


@pytest.fixture
def judging_config():
    return DarkmodeConfig(page_height=800)


def test_classify_positions(judging_config, make_element):
    sched = ConversionScheduler(judging_config)
    assert sched.classify(make_element(rect=(-50, -10))) is Position.ABOVE
    assert sched.classify(make_element(rect=(10, 30))) is Position.FIRST_PAINT
    assert sched.classify(make_element(rect=(-10, 30))) is Position.FIRST_PAINT
    assert sched.classify(make_element(rect=(900, 950))) is Position.BELOW


def test_first_paint_flushed_once_after_below_element(judging_config, make_element, sink, sheets):
    above = make_element(style=WHITE_BG, rect=(-50, -10))
    in_view = make_element(style=WHITE_BG, rect=(10, 30), visible=False)
    below = make_element(style=WHITE_BG, rect=(900, 950))
    also_below = make_element(style=WHITE_BG, rect=(1000, 1050))

    report = ConversionScheduler(judging_config, sink=sink).run([above, in_view, below, also_below])

    assert report.first_paint_flushed
    assert report.rules == 4
    assert [first for _, first in sheets] == [True, False]
    first_paint, remaining = sheets[0][0], sheets[1][0]
    assert "js_darkmode__1{" in first_paint
    assert "js_darkmode__0{" not in first_paint
    for name in ("js_darkmode__0{", "js_darkmode__2{", "js_darkmode__3{"):
        assert name in remaining
    assert in_view.visible
    assert judging_config.need_judge_first_page is False


def test_short_page_flushes_first_paint_at_end(judging_config, make_element, sink, sheets):
    only = make_element(style=WHITE_BG, rect=(10, 30), visible=False)
    report = ConversionScheduler(judging_config, sink=sink).run([only])
    assert report.first_paint_flushed
    assert [first for _, first in sheets] == [True]
    assert only.visible


def test_without_judging_everything_is_remaining(config, make_element, sink, sheets):
    els = [make_element(style=WHITE_BG, rect=(10, 30)) for _ in range(3)]
    report = ConversionScheduler(config, sink=sink).run(els)
    assert not report.first_paint_flushed
    assert len(sheets) == 1 and sheets[0][1] is False


def test_context_propagates_to_descendants(config, make_element):
    child = make_element("p", "color: #333", text="x")
    parent = make_element("div", WHITE_BG, children=[child])
    ConversionScheduler(config).run([parent, child])
    assert child.context.background == "rgb(36, 36, 36)"
    assert child.context.original_background == "rgb(255, 255, 255)"
    assert parent.context.original_background == "rgb(255, 255, 255)"
    # the child's own text decision stays on the child
    assert child.context.original_text == "rgb(51, 51, 51)"
    assert parent.context.original_text is None


def test_class_names_unique_across_runs_until_reset(config, make_element):
    sched = ConversionScheduler(config)
    first = [make_element(style=WHITE_BG) for _ in range(3)]
    sched.run(first)
    second = [make_element(style=WHITE_BG) for _ in range(2)]
    sched.run(second)
    names = [el.classes[0] for el in first + second]
    assert names == [f"js_darkmode__{i}" for i in range(5)]
    sched.reset()
    again = make_element(style=WHITE_BG)
    sched.run([again])
    assert again.classes == ["js_darkmode__0"]


def test_previous_run_classes_are_stripped(config, make_element):
    el = make_element(style=WHITE_BG, classes=["keep", "js_darkmode__42"])
    ConversionScheduler(config).run([el])
    assert el.classes == ["keep", "js_darkmode__0"]


def test_element_failure_is_reported_and_skipped(make_element, monkeypatch):
    errors = []
    config = DarkmodeConfig(need_judge_first_page=False, error=errors.append)
    sched = ConversionScheduler(config)
    original = sched.synthesizer.convert

    def flaky(element):
        if element.tag_name == "SPAN":
            raise RuntimeError("boom")
        return original(element)

    monkeypatch.setattr(sched.synthesizer, "convert", flaky)
    report = sched.run([make_element("span", WHITE_BG), make_element("div", WHITE_BG)])
    assert report.rules == 1
    assert len(report.errors) == 1
    assert isinstance(errors[0], ConversionError)
    assert errors[0].context["tag"] == "SPAN"
    assert isinstance(errors[0].__cause__, RuntimeError)
    assert "js_darkmode__0{" in sched.writer.stylesheet


def test_resolve_queued_emits_layers(make_element, sheets, sink):
    config = DarkmodeConfig(need_judge_first_page=False, delay_bg_judge=True)
    sched = ConversionScheduler(config, sink=sink)
    text = make_element("p", text="hello", rect=(10, 20))
    bg = make_element("div", "background-image: linear-gradient(#fff, #eee)", rect=(0, 100), children=[text])
    sched.run([bg, text])
    assert len(sched.text_queue) == 1
    assert "js_darkmode__bg__0{" not in sched.writer.stylesheet
    assert sched.resolve_queued() == 1
    assert "js_darkmode__bg__0{" in sheets[-1][0]
    assert len(sched.layers) == 0
