"""Interactive chart viewer state: viewport, zooming, scrolling and update pacing."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any

from .geometry import (
    Direction,
    ImageScale,
    Point,
    Rect,
    drag_zoom_rect,
    is_drag,
    normalize_rect,
    selection_edges,
)

_EPSILON = 1e-12


class MouseUsage(IntEnum):
    """What a left-button press on the plot area does."""

    DEFAULT = 0
    SCROLL = 1
    ZOOM_IN = 3
    ZOOM_OUT = 4


class UpdateState(Enum):
    """Whether a display update is being held back until an event finishes."""

    NO_DELAY = 0
    NEED_DELAY = 1
    NEED_UPDATE = 2


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass
class ViewPort:
    """The visible part of the full chart, as fractions of its extent.

    ``left``/``width`` run along the x axis and ``top``/``height`` along the y
    axis, all within ``[0, 1]``. ``plot_area`` is the plot area in chart image
    pixels, used to map mouse positions onto the viewport.
    """

    left: float = 0.0
    top: float = 0.0
    width: float = 1.0
    height: float = 1.0
    plot_area: Rect = field(default_factory=lambda: Rect(0, 0, 1, 1))
    zoom_in_width_limit: float = 0.01
    zoom_in_height_limit: float = 0.01
    zoom_out_width_limit: float = 1.0
    zoom_out_height_limit: float = 1.0
    _drag_origin: tuple[float, float] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if self.plot_area.width <= 0 or self.plot_area.height <= 0:
            raise ValueError("plot area must have a positive size")

    def _state(self) -> tuple[float, float, float, float]:
        return (self.left, self.top, self.width, self.height)

    def _fraction_x(self, x: float) -> float:
        return (x - self.plot_area.left) / self.plot_area.width

    def _fraction_y(self, y: float) -> float:
        return (y - self.plot_area.top) / self.plot_area.height

    def can_zoom_in(self, direction: Direction) -> bool:
        """Whether the view can shrink further along an allowed axis."""
        horizontal = (
            direction != Direction.VERTICAL
            and self.width > self.zoom_in_width_limit + _EPSILON
        )
        vertical = (
            direction != Direction.HORIZONTAL
            and self.height > self.zoom_in_height_limit + _EPSILON
        )
        return horizontal or vertical

    def can_zoom_out(self, direction: Direction) -> bool:
        """Whether the view can grow further along an allowed axis."""
        horizontal = (
            direction != Direction.VERTICAL
            and self.width < self.zoom_out_width_limit - _EPSILON
        )
        vertical = (
            direction != Direction.HORIZONTAL
            and self.height < self.zoom_out_height_limit - _EPSILON
        )
        return horizontal or vertical

    def zoom_around(self, x: float, y: float, rx: float, ry: float) -> bool:
        """Zoom by ``rx``/``ry`` (above 1 zooms in) keeping image point (x, y) fixed."""
        if rx <= 0 or ry <= 0:
            raise ValueError("zoom ratios must be positive")
        before = self._state()
        if rx != 1:
            fx = self._fraction_x(x)
            anchor = self.left + fx * self.width
            new_width = _clamp(
                self.width / rx, self.zoom_in_width_limit, self.zoom_out_width_limit
            )
            self.left = anchor - fx * new_width
            self.width = new_width
        if ry != 1:
            fy = self._fraction_y(y)
            anchor = self.top + fy * self.height
            new_height = _clamp(
                self.height / ry, self.zoom_in_height_limit, self.zoom_out_height_limit
            )
            self.top = anchor - fy * new_height
            self.height = new_height
        self.validate()
        return self._state() != before

    def zoom_at(self, direction: Direction, x: float, y: float, ratio: float) -> bool:
        """Zoom by ``ratio`` around (x, y) along the axes ``direction`` allows."""
        rx = ratio if direction != Direction.VERTICAL else 1.0
        ry = ratio if direction != Direction.HORIZONTAL else 1.0
        return self.zoom_around(x, y, rx, ry)

    def zoom_to(
        self, direction: Direction, x1: float, y1: float, x2: float, y2: float
    ) -> bool:
        """Zoom so the image rectangle (x1, y1)-(x2, y2) fills the view."""
        before = self._state()
        if direction != Direction.VERTICAL:
            f1, f2 = sorted(
                (_clamp(self._fraction_x(x1), 0, 1), _clamp(self._fraction_x(x2), 0, 1))
            )
            new_left = self.left + f1 * self.width
            new_width = (f2 - f1) * self.width
            if new_width < self.zoom_in_width_limit:
                centre = new_left + new_width / 2
                new_width = self.zoom_in_width_limit
                new_left = centre - new_width / 2
            self.left, self.width = new_left, new_width
        if direction != Direction.HORIZONTAL:
            f1, f2 = sorted(
                (_clamp(self._fraction_y(y1), 0, 1), _clamp(self._fraction_y(y2), 0, 1))
            )
            new_top = self.top + f1 * self.height
            new_height = (f2 - f1) * self.height
            if new_height < self.zoom_in_height_limit:
                centre = new_top + new_height / 2
                new_height = self.zoom_in_height_limit
                new_top = centre - new_height / 2
            self.top, self.height = new_top, new_height
        self.validate()
        return self._state() != before

    def start_drag(self) -> None:
        """Remember the current position as the origin of a scroll drag."""
        self._drag_origin = (self.left, self.top)

    def drag_to(self, direction: Direction, dx: float, dy: float) -> bool:
        """Scroll so the content follows a drag of (dx, dy) image pixels from its start."""
        origin_left, origin_top = self._drag_origin or (self.left, self.top)
        before = self._state()
        if direction != Direction.VERTICAL:
            self.left = origin_left - dx / self.plot_area.width * self.width
        if direction != Direction.HORIZONTAL:
            self.top = origin_top - dy / self.plot_area.height * self.height
        self.validate()
        return self._state() != before

    def validate(self) -> None:
        """Bring sizes within the zoom limits and the view inside the chart."""
        self.width = _clamp(
            self.width, self.zoom_in_width_limit, min(1.0, self.zoom_out_width_limit)
        )
        self.height = _clamp(
            self.height, self.zoom_in_height_limit, min(1.0, self.zoom_out_height_limit)
        )
        self.left = _clamp(self.left, 0.0, max(0.0, 1.0 - self.width))
        self.top = _clamp(self.top, 0.0, max(0.0, 1.0 - self.height))


class ChartViewer:
    """Mouse-driven zoom and scroll over a chart, with paced viewport updates.

    ``on_view_port_changed`` is called with the viewer whenever the viewport
    changes; a handler typically redraws the chart and passes it to
    :meth:`set_chart`. ``on_click`` is called for a plain click.
    """

    def __init__(
        self,
        plot_area: Rect | None = None,
        scale: ImageScale | None = None,
        *,
        mouse_usage: MouseUsage = MouseUsage.DEFAULT,
        zoom_direction: Direction = Direction.HORIZONTAL,
        scroll_direction: Direction = Direction.HORIZONTAL,
        zoom_in_ratio: float = 2.0,
        zoom_out_ratio: float = 0.5,
        mouse_wheel_zoom_ratio: float = 1.0,
        min_drag: int = 5,
        update_interval: int = 20,
        selection_border_width: int = 2,
        on_view_port_changed: Callable[[ChartViewer], None] | None = None,
        on_click: Callable[[ChartViewer], None] | None = None,
    ) -> None:
        self.viewport = ViewPort(plot_area=plot_area or Rect(0, 0, 1, 1))
        self.scale = scale or ImageScale()
        self.mouse_usage = mouse_usage
        self.zoom_direction = zoom_direction
        self.scroll_direction = scroll_direction
        self.zoom_in_ratio = zoom_in_ratio
        self.zoom_out_ratio = zoom_out_ratio
        self.mouse_wheel_zoom_ratio = mouse_wheel_zoom_ratio
        self.min_drag = min_drag
        self.update_interval = update_interval
        self.selection_border_width = selection_border_width
        self.on_view_port_changed = on_view_port_changed
        self.on_click = on_click

        self.chart: Any = None
        self.displayed_chart: Any = None
        self.display_count = 0
        self.selection: Rect | None = None

        self.need_update_chart = False
        self.need_update_image_map = False
        self.hold_timer_active = False
        self.update_state = UpdateState.NO_DELAY
        self._delayed_chart: Any = None
        self._delay_image_map_update = False

        self.is_on_plot_area = False
        self.is_mouse_down = False
        self.is_drag_scrolling = False
        self.buttons = 0
        self._mouse_down_at = Point(0, 0)
        self._mouse: Point | None = None

    @property
    def plot_area(self) -> Rect:
        return self.viewport.plot_area

    @property
    def keep_aspect_ratio(self) -> bool:
        return self.zoom_direction == Direction.KEEP_ASPECT_RATIO

    @property
    def selection_outline(self) -> tuple[Rect, Rect, Rect, Rect] | None:
        """The four bars drawing the zoom selection box, if one is shown."""
        if self.selection is None:
            return None
        return selection_edges(self.selection, self.selection_border_width)

    # Display pacing

    def set_chart(self, chart: Any) -> None:
        """Show ``chart``, deferring the display while an event is in progress."""
        self.chart = chart
        self._update_display()

    def _update_display(self) -> None:
        if self.update_state == UpdateState.NO_DELAY:
            self._commit_update_chart()
        else:
            self.update_state = UpdateState.NEED_UPDATE
            self._delayed_chart = self.chart

    def _commit_update_chart(self) -> None:
        if self.update_state == UpdateState.NEED_DELAY:
            self.update_state = UpdateState.NO_DELAY
            return
        if self.update_state == UpdateState.NEED_UPDATE:
            chart = self._delayed_chart
        else:
            chart = self.chart
        self.displayed_chart = chart
        self.display_count += 1
        self.update_state = UpdateState.NO_DELAY
        self._delayed_chart = None

    def update_view_port(self, need_update_chart: bool, need_update_image_map: bool) -> None:
        """Fire a viewport change, merging requests that arrive within the hold interval."""
        self.need_update_chart = self.need_update_chart or need_update_chart
        self.need_update_image_map = need_update_image_map
        if self.hold_timer_active:
            return

        had_delay = self.update_state != UpdateState.NO_DELAY
        if not had_delay:
            self.update_state = UpdateState.NEED_DELAY

        self.viewport.validate()
        if self.on_view_port_changed is not None:
            self.on_view_port_changed(self)

        if not had_delay:
            self._commit_update_chart()

        self.need_update_chart = False
        self.need_update_image_map = False
        if self.update_interval > 0:
            self.hold_timer_active = True

    def on_timer(self) -> None:
        """End the hold interval and apply any requests that were held back."""
        self.hold_timer_active = False
        if self.need_update_chart or self.need_update_image_map:
            self.update_view_port(self.need_update_chart, self.need_update_image_map)

    # Mouse handling

    def _in_plot_area(self, x: float, y: float) -> bool:
        pa = self.plot_area
        return pa.left <= x <= pa.right and pa.top <= y <= pa.bottom

    def mouse_wheel_zoom(self, x: int, y: int, delta: int) -> bool:
        """Zoom around image point (x, y); positive ``delta`` zooms in."""
        if self.mouse_wheel_zoom_ratio == 1:
            return False
        ratio = self.mouse_wheel_zoom_ratio if delta > 0 else 1 / self.mouse_wheel_zoom_ratio
        rx = ratio if self.zoom_direction != Direction.VERTICAL else 1.0
        ry = ratio if self.zoom_direction != Direction.HORIZONTAL else 1.0
        if self.viewport.zoom_around(x, y, rx, ry):
            self.update_view_port(True, False)
            self._delay_image_map_update = True
        return True

    def mouse_down(self, point: Point) -> bool:
        """Start a zoom or scroll drag; returns whether the press was taken."""
        ix, iy = self.scale.to_image_x(point.x), self.scale.to_image_y(point.y)
        if not self._in_plot_area(ix, iy) or self.mouse_usage == MouseUsage.DEFAULT:
            return False
        self.is_mouse_down = True
        self._mouse_down_at = point
        self.viewport.start_drag()
        return True

    def mouse_move(self, point: Point, buttons: int = 0) -> None:
        """Track the mouse, drawing the zoom box or scrolling while dragging."""
        self._mouse = point
        self.buttons = buttons
        self.update_state = UpdateState.NEED_DELAY

        ix, iy = self.scale.to_image_x(point.x), self.scale.to_image_y(point.y)
        self.is_on_plot_area = self.is_mouse_down or self._in_plot_area(ix, iy)
        if self.is_mouse_down:
            self._plot_area_drag(point)

        self._commit_update_chart()

        if self._delay_image_map_update:
            self._delay_image_map_update = False
            if not self.is_mouse_down:
                self.update_view_port(False, True)

    def _is_drag(self, direction: Direction, point: Point) -> bool:
        return is_drag(direction, self._mouse_down_at, point, self.min_drag)

    def _drag_rect(self, point: Point) -> Rect:
        return drag_zoom_rect(
            self._mouse_down_at,
            point,
            self.scale,
            self.plot_area.width,
            self.plot_area.height,
            self.keep_aspect_ratio,
        )

    def _plot_area_drag(self, point: Point) -> None:
        if self.mouse_usage == MouseUsage.ZOOM_IN:
            dragging = self.viewport.can_zoom_in(self.zoom_direction) and self._is_drag(
                self.zoom_direction, point
            )
            if not dragging:
                self.selection = None
                return
            rect = self._drag_rect(point)
            pa = self.plot_area
            if self.zoom_direction == Direction.HORIZONTAL:
                self.selection = normalize_rect(
                    rect.left,
                    self.scale.to_display_y(pa.top),
                    rect.width,
                    self.scale.to_display_y(pa.height),
                )
            elif self.zoom_direction == Direction.VERTICAL:
                self.selection = normalize_rect(
                    self.scale.to_display_x(pa.left),
                    rect.top,
                    self.scale.to_display_x(pa.width),
                    rect.height,
                )
            else:
                self.selection = normalize_rect(rect.left, rect.top, rect.width, rect.height)
        elif self.mouse_usage == MouseUsage.SCROLL:
            if self.is_drag_scrolling or self._is_drag(self.scroll_direction, point):
                self.is_drag_scrolling = True
                moved = self.viewport.drag_to(
                    self.scroll_direction,
                    self.scale.to_image_x(point.x - self._mouse_down_at.x),
                    self.scale.to_image_y(point.y - self._mouse_down_at.y),
                )
                if moved:
                    self.update_view_port(True, False)

    def mouse_up(self, point: Point) -> bool:
        """Finish a drag or click; returns whether a drag had been started."""
        if not self.is_mouse_down:
            return False
        self.is_mouse_down = False
        self.selection = None
        has_update = False
        vp = self.viewport

        if self.mouse_usage == MouseUsage.ZOOM_IN:
            if vp.can_zoom_in(self.zoom_direction):
                if self._is_drag(self.zoom_direction, point):
                    rect = self._drag_rect(point)
                    has_update = vp.zoom_to(
                        self.zoom_direction,
                        self.scale.to_image_x(rect.left),
                        self.scale.to_image_y(rect.top),
                        self.scale.to_image_x(rect.right),
                        self.scale.to_image_y(rect.bottom),
                    )
                else:
                    has_update = vp.zoom_at(
                        self.zoom_direction,
                        self.scale.to_image_x(point.x),
                        self.scale.to_image_y(point.y),
                        self.zoom_in_ratio,
                    )
        elif self.mouse_usage == MouseUsage.ZOOM_OUT:
            if vp.can_zoom_out(self.zoom_direction):
                has_update = vp.zoom_at(
                    self.zoom_direction,
                    self.scale.to_image_x(point.x),
                    self.scale.to_image_y(point.y),
                    self.zoom_out_ratio,
                )
        elif self.is_drag_scrolling:
            self.update_view_port(False, True)
        elif self.on_click is not None:
            self.on_click(self)

        self.is_drag_scrolling = False
        if has_update:
            self.update_view_port(True, True)
        return True

    def chart_mouse_x(self) -> int:
        """Mouse x in chart image pixels, or the plot area's right edge before any move."""
        if self._mouse is None:
            return self.plot_area.left + self.plot_area.width
        return int(self.scale.to_image_x(self._mouse.x) + 0.5)

    def chart_mouse_y(self) -> int:
        """Mouse y in chart image pixels, or the plot area's bottom edge before any move."""
        if self._mouse is None:
            return self.plot_area.top + self.plot_area.height
        return int(self.scale.to_image_y(self._mouse.y) + 0.5)