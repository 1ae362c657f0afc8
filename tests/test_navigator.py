import pytest

from bandfit.geometry import Direction, Point, Rect
from bandfit.navigator import CursorShape, ViewPortControl, cursor_for_position
from bandfit.viewer import ChartViewer


def make(**viewer_kwargs):
    calls = []
    viewer = ChartViewer(
        plot_area=Rect(0, 0, 100, 100),
        update_interval=0,
        on_view_port_changed=calls.append,
        **viewer_kwargs,
    )
    control = ViewPortControl(Rect(0, 0, 200, 100), viewer=viewer)
    return viewer, control, calls


@pytest.mark.parametrize(
    "position, cursor",
    [
        ("left", CursorShape.SIZE_WE),
        ("right", CursorShape.SIZE_WE),
        ("top", CursorShape.SIZE_NS),
        ("bottom", CursorShape.SIZE_NS),
        ("top_left", CursorShape.SIZE_NWSE),
        ("bottom_right", CursorShape.SIZE_NWSE),
        ("top_right", CursorShape.SIZE_NESW),
        ("bottom_left", CursorShape.SIZE_NESW),
        ("center", CursorShape.ARROW),
        (None, CursorShape.ARROW),
    ],
)
def test_cursor_for_position(position, cursor):
    assert cursor_for_position(position) is cursor


def test_is_drag_without_viewer_is_false():
    control = ViewPortControl(Rect(0, 0, 200, 100))
    assert control.is_drag(Point(50, 50)) is False


def test_is_drag_uses_viewer_minimum():
    viewer, control, _ = make(min_drag=5)
    viewer.viewport.width = 0.5
    assert control.mouse_down(Point(50, 50))
    assert control.is_drag(Point(54, 50)) is False
    assert control.is_drag(Point(55, 50)) is True
    assert control.is_drag(Point(50, 45)) is True


def test_sync_state_copies_directions():
    viewer, control, _ = make(
        zoom_direction=Direction.VERTICAL, scroll_direction=Direction.BOTH
    )
    control.sync_state()
    assert control.zoom_direction == Direction.VERTICAL
    assert control.scroll_direction == Direction.BOTH


def test_detached_control_ignores_press():
    viewer, control, _ = make()
    control.set_viewer(None)
    assert control.viewer is None
    assert control.mouse_down(Point(50, 50)) is False
    assert control.mouse_up(Point(50, 50)) is False


def test_set_viewer_redraws():
    viewer, control, _ = make()
    before = control.display_count
    control.set_viewer(viewer)
    assert control.viewer is viewer
    assert control.display_count == before + 1


def test_drag_inside_viewport_scrolls():
    viewer, control, calls = make()
    viewer.viewport.width = 0.5
    assert control.mouse_down(Point(50, 50))
    control.mouse_move(Point(90, 50))
    assert viewer.viewport.left == pytest.approx(40 / 200)
    assert viewer.viewport.width == pytest.approx(0.5)
    assert calls
    assert control.mouse_up(Point(90, 50)) is True
    assert control.mouse_up(Point(90, 50)) is False


def test_small_move_does_not_scroll():
    viewer, control, calls = make(min_drag=5)
    viewer.viewport.width = 0.5
    control.mouse_down(Point(50, 50))
    control.mouse_move(Point(53, 50))
    assert viewer.viewport.left == 0.0
    assert calls == []


def test_horizontal_scroll_keeps_top():
    viewer, control, _ = make(scroll_direction=Direction.HORIZONTAL)
    viewer.viewport.height = 0.5
    viewer.viewport.width = 0.5
    control.mouse_down(Point(50, 25))
    control.mouse_move(Point(50, 65))
    assert viewer.viewport.top == 0.0


def test_two_way_scroll_moves_top():
    viewer, control, _ = make(scroll_direction=Direction.BOTH)
    viewer.viewport.height = 0.5
    viewer.viewport.width = 0.5
    control.mouse_down(Point(50, 25))
    control.mouse_move(Point(50, 65))
    assert viewer.viewport.top > 0.0
    assert viewer.viewport.height == pytest.approx(0.5)


def test_drag_right_edge_resizes():
    viewer, control, _ = make()
    viewer.viewport.width = 0.5
    control.mouse_down(Point(100, 50))
    cursor = control.mouse_move(Point(140, 50))
    assert cursor is CursorShape.SIZE_WE
    assert viewer.viewport.left == 0.0
    assert viewer.viewport.width > 0.5
    assert viewer.viewport.width <= 1.0


def test_drag_left_edge_keeps_right_side():
    viewer, control, _ = make()
    viewer.viewport.left = 0.25
    viewer.viewport.width = 0.5
    right = viewer.viewport.left + viewer.viewport.width
    control.mouse_down(Point(50, 50))
    control.mouse_move(Point(80, 50))
    vp = viewer.viewport
    assert vp.left > 0.25
    assert vp.left + vp.width == pytest.approx(right)


def test_press_outside_viewport_centres_it():
    viewer, control, _ = make()
    viewer.viewport.width = 0.5
    assert control.mouse_down(Point(150, 50))
    vp = viewer.viewport
    assert vp.left + vp.width / 2 == pytest.approx(150 / 200)


def test_press_outside_area_is_ignored():
    viewer, control, _ = make()
    assert control.mouse_down(Point(500, 50)) is False


def test_hover_cursors_horizontal_zoom():
    viewer, control, _ = make()
    viewer.viewport.width = 0.5
    assert control.mouse_move(Point(100, 50)) is CursorShape.SIZE_WE
    assert control.mouse_move(Point(50, 50)) is CursorShape.ARROW
    assert control.mouse_move(Point(50, 0)) is CursorShape.ARROW


def test_hover_cursors_two_way_zoom():
    viewer, control, _ = make(zoom_direction=Direction.BOTH)
    viewer.viewport.width = 0.5
    viewer.viewport.height = 0.5
    assert control.mouse_move(Point(50, 50)) is CursorShape.SIZE_NS
    assert control.mouse_move(Point(100, 50)) is CursorShape.SIZE_NWSE
    assert control.mouse_move(Point(0, 50)) is CursorShape.SIZE_NESW


def test_mouse_wheel_without_viewer():
    control = ViewPortControl(Rect(0, 0, 200, 100))
    assert control.mouse_wheel(Point(50, 50), 120) is False


def test_mouse_wheel_outside_area():
    viewer, control, _ = make(mouse_wheel_zoom_ratio=2.0)
    assert control.mouse_wheel(Point(500, 50), 120) is False
    assert viewer.viewport.width == 1.0


def test_mouse_wheel_disabled_ratio():
    viewer, control, _ = make()
    assert control.mouse_wheel(Point(50, 50), 120) is False


def test_mouse_wheel_zooms_viewer():
    viewer, control, calls = make(mouse_wheel_zoom_ratio=2.0)
    assert control.mouse_wheel(Point(50, 50), 120) is True
    assert viewer.viewport.width < 1.0
    assert calls


def test_invalid_area_rejected():
    with pytest.raises(ValueError):
        ViewPortControl(Rect(0, 0, 0, 10))