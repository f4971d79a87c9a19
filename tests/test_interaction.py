import pytest

from gantt_models import ChartConfig
from interaction import HoverController, TooltipState, format_tooltip, hit_test, label_box, tooltip_anchor
from layout import Rect, compute_layout
from scales import DomainLookupError


@pytest.fixture
def chart(six_tasks):
    config = ChartConfig(tooltip_scale=1.0, tooltip_offset=(0.0, -8.0))
    layout = compute_layout(six_tasks, config)
    return six_tasks, layout, HoverController(six_tasks, layout, config)


def _inside_rect(bar):
    # Near the top of the bar, above the label box.
    return bar.x + 1.0, bar.y + 2.0


def test_idle_state():
    assert TooltipState() == TooltipState(visible=False, content="", x=0.0, y=0.0, task_index=None)


def test_hover_rect_shows_task_summary(chart):
    tasks, layout, ctl = chart
    state = ctl.enter(2)
    t = tasks[2]
    assert state.visible is True
    assert state.content == f"{t.label}/{t.date}/{t.type}/{t.meeting}/{t.status}"
    assert state.task_index == 2


def test_leave_hides_without_clearing_content(chart):
    _, _, ctl = chart
    shown = ctl.enter(0)
    hidden = ctl.leave(0)
    assert hidden.visible is False
    assert hidden.content == shown.content
    assert (hidden.x, hidden.y) == (shown.x, shown.y)


def test_next_hover_replaces_content(chart):
    tasks, _, ctl = chart
    ctl.enter(0)
    ctl.leave(0)
    state = ctl.enter(4)
    assert state.content.startswith(tasks[4].label + "/")


def test_latest_hover_wins_over_stale_leave(chart):
    _, _, ctl = chart
    ctl.enter(0)
    ctl.enter(1)
    state = ctl.leave(0)
    assert state.visible is True
    assert state.task_index == 1


def test_rect_and_label_hover_share_one_handler(chart):
    tasks, layout, ctl = chart
    bar = layout.bars[3]

    via_rect = ctl.move(*_inside_rect(bar))
    ctl.reset()
    via_label = ctl.move(bar.label_x, bar.label_y - 1.0)

    assert via_rect.content == via_label.content == format_tooltip(tasks[3])
    assert via_rect.task_index == via_label.task_index == 3


def test_move_dispatches_enter_and_leave(chart):
    _, layout, ctl = chart
    state = ctl.move(*_inside_rect(layout.bars[0]))
    assert state.visible and state.task_index == 0

    state = ctl.move(*_inside_rect(layout.bars[2]))
    assert state.visible and state.task_index == 2

    state = ctl.move(1.0, 1.0)
    assert state.visible is False
    assert ctl.hovered is None


def test_hit_test_misses_empty_space(chart):
    _, layout, _ = chart
    assert hit_test(layout, 1.0, 1.0) is None
    hit = hit_test(layout, *_inside_rect(layout.bars[5]))
    assert hit.bar.index == 5 and hit.part == "rect"


def test_label_box_centred_on_anchor(chart):
    _, layout, _ = chart
    bar = layout.bars[0]
    box = label_box(bar, 10)
    assert box.x + box.width / 2 == pytest.approx(bar.label_x)


def test_tooltip_anchor_single_formula():
    element = Rect(x=100, y=50, width=40, height=30, fill="#000000")
    assert tooltip_anchor(element) == (120, 50)
    assert tooltip_anchor(element, scale=0.5, offset=(2, -8)) == (62, 17)


def test_tooltip_separator_is_configurable(six_tasks):
    config = ChartConfig(tooltip_separator=" | ")
    layout = compute_layout(six_tasks, config)
    state = HoverController(six_tasks, layout, config).enter(0)
    assert state.content == "Plan | 03/01/2022 | Workshop | Kickoff | Not Started"


def test_controller_rejects_foreign_layout(six_tasks):
    layout = compute_layout(six_tasks[:2])
    with pytest.raises(ValueError):
        HoverController(six_tasks, layout)


@pytest.mark.parametrize("index", [-1, 6, 100])
def test_out_of_range_task_index_rejected(chart, index):
    _, _, ctl = chart
    with pytest.raises(DomainLookupError):
        ctl.enter(index)
    with pytest.raises(DomainLookupError):
        ctl.leave(index)
    assert ctl.state == TooltipState()


def test_rejected_index_does_not_disturb_hover(chart):
    _, _, ctl = chart
    ctl.enter(5)
    with pytest.raises(DomainLookupError):
        ctl.enter(-1)
    state = ctl.leave(5)
    assert state.visible is False
    assert state.task_index == 5
