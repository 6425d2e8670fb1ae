import datetime

import numpy as np
import pytest

from weatherscatter import config
from weatherscatter.controller.chart import Group, Node, Tag
from weatherscatter.controller.interaction import format_temperature
from weatherscatter.model.density import estimate
from weatherscatter.model.palette import month_color

PEAK = 0.75 / 7.0


def test_initial_render(two_point_chart, controller, surface):
    assert two_point_chart.scales.x.domain == (0.0, 100.0)
    assert surface.points.shape == (2, 2)
    assert surface.point_colors == [month_color("01"), month_color("07")]
    assert set(surface.cells) == {0, 1}
    assert surface.opacity[Group.HOVER] == 0.0
    assert surface.opacity[Group.TOOLTIP] == 0.0
    assert surface.opacity[Group.LEGEND_HIGHLIGHT] == 0.0
    global_curves = [c for c in surface.calls if c[0] == "draw_area_path"]
    assert len(global_curves) == 2
    assert all(c[2]["tag"] is None for c in global_curves)


def test_format_temperature():
    assert format_temperature(60) == "60.0"
    assert format_temperature(59.96) == "60.0"
    assert format_temperature(-3.14159) == "-3.1"


def test_hover_second_point_fills_tooltip(two_point_chart, controller, surface):
    controller.on_cell_enter(1)

    assert controller.hovered_index == 1
    assert surface.texts[Node.TOOLTIP_MIN] == "60.0"
    assert surface.texts[Node.TOOLTIP_MAX] == "90.0"
    assert surface.texts[Node.TOOLTIP_DATE] == "Thursday, July 01, 2010"
    assert surface.opacity[Group.HOVER] == 1.0
    assert surface.opacity[Group.TOOLTIP] == 1.0

    x, y = two_point_chart.projected[1]
    assert surface.transforms[Group.TOOLTIP] == pytest.approx((x - 90.0, y + 25.0))
    (_, args, _), = surface.tagged[Tag.HOVER_DOT]
    assert args[1:3] == pytest.approx((x, y))

    markers = surface.tagged[Tag.STRIP_MARKER]
    assert [m[1][0] for m in markers] == [Group.MIN_STRIP, Group.MAX_STRIP]
    assert markers[0][1][1] == pytest.approx(two_point_chart.scales.x.forward(60.0))
    assert markers[1][1][2] == pytest.approx(two_point_chart.scales.y.forward(90.0))


def test_leave_returns_to_idle(controller, surface):
    controller.on_cell_enter(0)
    controller.on_cell_leave(0)

    assert controller.hover is None
    assert surface.opacity[Group.HOVER] == 0.0
    assert surface.opacity[Group.TOOLTIP] == 0.0
    assert surface.count(Tag.HOVER_DOT) == 0
    assert surface.count(Tag.STRIP_MARKER) == 0


def test_late_leave_of_previous_cell_is_ignored(controller, surface):
    controller.on_cell_enter(0)
    controller.on_cell_enter(1)
    controller.on_cell_leave(0)

    assert controller.hovered_index == 1
    assert surface.count(Tag.HOVER_DOT) == 1
    assert surface.count(Tag.STRIP_MARKER) == 2
    assert surface.texts[Node.TOOLTIP_MIN] == "60.0"


def test_hover_exclusivity_under_random_events(year_controller, surface, year_dataset):
    rng = np.random.default_rng(1)
    n = len(year_dataset)
    for _ in range(500):
        index = int(rng.integers(0, n))
        if rng.random() < 0.6:
            year_controller.on_cell_enter(index)
        else:
            year_controller.on_cell_leave(index)
        assert surface.count(Tag.HOVER_DOT) <= 1
        assert surface.count(Tag.STRIP_MARKER) <= 2
        if year_controller.hover is None:
            assert surface.count(Tag.HOVER_DOT) == 0
        else:
            assert surface.count(Tag.HOVER_DOT) == 1


def test_failed_redraw_leaves_no_highlight(controller, surface, monkeypatch):
    controller.on_cell_enter(0)

    def broken(*args, **kwargs):
        raise RuntimeError("backend gone")

    monkeypatch.setattr(surface, "draw_rect", broken)
    with pytest.raises(RuntimeError):
        controller.on_cell_enter(1)

    assert controller.hover is None
    assert surface.count(Tag.HOVER_DOT) == 0
    assert surface.opacity[Group.HOVER] == 0.0


def test_brush_over_first_point_recomputes_curves(two_point_chart, controller, surface):
    controller.on_legend_move(-10.0)

    state = controller.brush_state
    assert state.range.start == datetime.datetime(2010, 1, 1)
    assert state.range.end - state.range.start == datetime.timedelta(days=30)
    assert state.selection.mask.tolist() == [True, False]

    min_grid = two_point_chart.min_estimator.grid
    max_grid = two_point_chart.max_estimator.grid
    np.testing.assert_allclose(state.min_curve.density, estimate([20.0], min_grid).density)
    np.testing.assert_allclose(state.max_curve.density, estimate([35.0], max_grid).density)
    assert state.min_curve.density.max() <= PEAK
    assert (state.min_curve.density[np.abs(min_grid - 20.0) > 7.0] == 0.0).all()
    assert (state.max_curve.density[np.abs(max_grid - 35.0) > 7.0] == 0.0).all()

    np.testing.assert_allclose(surface.point_opacity, [1.0, config.DIMMED_OPACITY])
    curves = surface.tagged[Tag.BRUSHED_CURVE]
    assert [c[1][0] for c in curves] == [Group.MIN_STRIP, Group.MAX_STRIP]
    assert all(c[1][2] == month_color("01") for c in curves)
    assert surface.opacity[Group.LEGEND_TICKS] == 0.0
    assert surface.opacity[Group.LEGEND_HIGHLIGHT] == 1.0
    assert surface.texts[Node.LEGEND_HIGHLIGHT_TEXT] == "January 01 – January 31"
    assert surface.transforms[Group.LEGEND_HIGHLIGHT] == pytest.approx((0.0, 0.0))


def test_brush_window_is_half_open(controller):
    # Upper edge: window [2010-06-01, 2010-07-01) excludes the July 1 point
    controller.on_legend_move(10_000.0)
    state = controller.brush_state
    assert abs(state.range.end - datetime.datetime(2010, 7, 1)) < datetime.timedelta(seconds=1)
    assert state.selection.mask.tolist() == [False, False]
    np.testing.assert_array_equal(state.min_curve.density, 0.0)


def test_latest_move_supersedes(year_controller, surface):
    for position in (10.0, 80.0, 160.0, 240.0):
        year_controller.on_legend_move(position)
        assert surface.count(Tag.BRUSHED_CURVE) == 2

    state = year_controller.brush_state
    np.testing.assert_allclose(surface.point_opacity, np.where(state.selection.mask, 1.0, config.DIMMED_OPACITY))


def test_legend_leave_restores(year_controller, surface, year_dataset):
    year_controller.on_legend_move(120.0)
    year_controller.on_legend_leave()

    assert not year_controller.is_brushing
    np.testing.assert_array_equal(surface.point_opacity, np.ones(len(year_dataset)))
    assert surface.point_opacity_duration == config.RESTORE_DURATION_MS
    assert surface.opacity[Group.LEGEND_TICKS] == 1.0
    assert surface.opacity[Group.LEGEND_HIGHLIGHT] == 0.0
    assert surface.count(Tag.BRUSHED_CURVE) == 0
    # global curves are drawn untagged and never removed
    assert "draw_area_path" in [c[0] for c in surface.calls if c[2].get("tag") is None]


def test_hover_and_brush_are_independent(year_controller, surface):
    year_controller.on_cell_enter(3)
    year_controller.on_legend_move(50.0)
    year_controller.on_legend_leave()

    assert year_controller.hovered_index == 3
    assert surface.count(Tag.HOVER_DOT) == 1


def test_static_scaffolding(two_point_chart, controller, surface):
    texts = [c[1][1] for c in surface.calls if c[0] == "draw_text" and c[1][0] == Group.BOUNDS]
    for label in ("0", "20", "40", "60", "80", "100"):
        assert texts.count(label) == 2

    (_, args, _), = [c for c in surface.calls if c[0] == "draw_gradient_rect"]
    stops = args[5]
    assert len(stops) == config.LEGEND_GRADIENT_STOPS
    assert stops[0] == (0.0, "#6e40aa")

    month_labels = [c[1][1] for c in surface.calls if c[0] == "draw_text" and c[1][0] == Group.LEGEND_TICKS]
    assert month_labels == ["Apr", "Jul", "Oct"]
