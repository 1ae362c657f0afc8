"""Overview control that shows the whole chart and lets the user move or resize the viewport."""

from __future__ import annotations

from enum import Enum

from .geometry import Direction, ImageScale, Point, Rect
from .viewer import ChartViewer, ViewPort

_HORIZONTAL_EDGES = ("left", "right")
_VERTICAL_EDGES = ("top", "bottom")


class CursorShape(Enum):
    """Mouse cursor shown over the control."""

    ARROW = "arrow"
    SIZE_WE = "size_we"
    SIZE_NS = "size_ns"
    SIZE_NWSE = "size_nwse"
    SIZE_NESW = "size_nesw"


_POSITION_CURSORS = {
    "left": CursorShape.SIZE_WE,
    "right": CursorShape.SIZE_WE,
    "top": CursorShape.SIZE_NS,
    "bottom": CursorShape.SIZE_NS,
    "top_left": CursorShape.SIZE_NWSE,
    "bottom_right": CursorShape.SIZE_NWSE,
    "top_right": CursorShape.SIZE_NESW,
    "bottom_left": CursorShape.SIZE_NESW,
}


def cursor_for_position(position: str | None) -> CursorShape:
    """Cursor for a hit position; edges and corners get sizing cursors, all else an arrow."""
    return _POSITION_CURSORS.get(position or "", CursorShape.ARROW)


class ViewPortControl:
    """Shows the full chart with the viewer's viewport drawn on it.

    Dragging inside the viewport scrolls it, dragging an edge or corner resizes
    it, and pressing outside it centres it on the pressed point. ``area`` is
    the region of the control's image that stands for the whole chart.
    """

    def __init__(
        self,
        area: Rect | None = None,
        scale: ImageScale | None = None,
        *,
        viewer: ChartViewer | None = None,
        edge_margin: float = 3.0,
    ) -> None:
        self.area = area or Rect(0, 0, 1, 1)
        if self.area.width <= 0 or self.area.height <= 0:
            raise ValueError("control area must have a positive size")
        self.scale = scale or ImageScale()
        self.edge_margin = edge_margin
        self.viewer: ChartViewer | None = None
        self.zoom_direction = Direction.HORIZONTAL
        self.scroll_direction = Direction.HORIZONTAL
        self.cursor = CursorShape.ARROW
        self.display_count = 0

        self.need_update_chart = False
        self.need_update_image_map = False

        self._mouse_down_at = Point(0, 0)
        self._drag_position: str | None = None
        self._drag_start: tuple[float, float, float, float] | None = None
        self._drag_image_start = (0.0, 0.0)
        self._dragging = False
        self._reentrant_guard = False

        if viewer is not None:
            self.set_viewer(viewer)

    @property
    def _viewport(self) -> ViewPort | None:
        return self.viewer.viewport if self.viewer is not None else None

    def set_viewer(self, viewer: ChartViewer | None) -> None:
        """Attach the control to a viewer, or detach it with ``None``."""
        if self._reentrant_guard:
            return
        self._reentrant_guard = True
        try:
            self.viewer = viewer
            self._drag_position = None
            self._dragging = False
        finally:
            self._reentrant_guard = False
        self.update_display()

    def update_display(self) -> None:
        """Redraw the chart and the viewport outline."""
        self.display_count += 1

    def sync_state(self) -> None:
        """Take the zoom and scroll directions from the viewer."""
        if self.viewer is not None:
            self.zoom_direction = self.viewer.zoom_direction
            self.scroll_direction = self.viewer.scroll_direction

    def is_drag(self, point: Point) -> bool:
        """Whether the mouse has moved at least the viewer's minimum drag since the press."""
        if self.viewer is None:
            return False
        minimum = self.viewer.min_drag
        move_x = abs(self._mouse_down_at.x - point.x)
        move_y = abs(self._mouse_down_at.y - point.y)
        return move_x >= minimum or move_y >= minimum

    def is_on_plot_area(self, x: float, y: float) -> bool:
        """Whether image point (x, y) lies on the chart area of the control."""
        area = self.area
        return area.left <= x <= area.right and area.top <= y <= area.bottom

    # Hit testing

    def _viewport_bounds(self, vp: ViewPort) -> tuple[float, float, float, float]:
        area = self.area
        left = area.left + vp.left * area.width
        top = area.top + vp.top * area.height
        return left, top, left + vp.width * area.width, top + vp.height * area.height

    def _hit(self, x: float, y: float) -> str | None:
        vp = self._viewport
        if vp is None or not self.is_on_plot_area(x, y):
            return None
        left, top, right, bottom = self._viewport_bounds(vp)
        m = self.edge_margin
        sizes_x = self.zoom_direction != Direction.VERTICAL
        sizes_y = self.zoom_direction != Direction.HORIZONTAL
        within_y = top - m <= y <= bottom + m
        within_x = left - m <= x <= right + m
        near_left = sizes_x and within_y and abs(x - left) <= m
        near_right = sizes_x and within_y and not near_left and abs(x - right) <= m
        near_top = sizes_y and within_x and abs(y - top) <= m
        near_bottom = sizes_y and within_x and not near_top and abs(y - bottom) <= m

        vertical = "top" if near_top else "bottom" if near_bottom else ""
        horizontal = "left" if near_left else "right" if near_right else ""
        if vertical and horizontal:
            return f"{vertical}_{horizontal}"
        if vertical or horizontal:
            return vertical or horizontal
        if left <= x <= right and top <= y <= bottom:
            return "center"
        return "outside"

    # Mouse handling

    def _centre_on(self, vp: ViewPort, x: float, y: float) -> None:
        before = (vp.left, vp.top, vp.width, vp.height)
        if self.scroll_direction != Direction.VERTICAL:
            vp.left = (x - self.area.left) / self.area.width - vp.width / 2
        if self.scroll_direction != Direction.HORIZONTAL:
            vp.top = (y - self.area.top) / self.area.height - vp.height / 2
        vp.validate()
        if (vp.left, vp.top, vp.width, vp.height) != before:
            self.need_update_chart = True

    def mouse_down(self, point: Point) -> bool:
        """Start moving or resizing the viewport; returns whether the press was taken."""
        self._mouse_down_at = point
        self.sync_state()
        x, y = self.scale.to_image_x(point.x), self.scale.to_image_y(point.y)
        position = self._hit(x, y)
        vp = self._viewport
        if position is None or vp is None:
            self._drag_position = None
            return False
        if position == "outside":
            self._centre_on(vp, x, y)
            position = "center"
        self._drag_position = position
        self._drag_start = (vp.left, vp.top, vp.width, vp.height)
        self._drag_image_start = (x, y)
        self._dragging = False
        self._update_chart_viewer_if_necessary()
        return True

    def _apply_drag(self, vp: ViewPort, x: float, y: float) -> None:
        assert self._drag_start is not None and self._drag_position is not None
        left, top, width, height = self._drag_start
        start_x, start_y = self._drag_image_start
        dfx = (x - start_x) / self.area.width
        dfy = (y - start_y) / self.area.height
        position = self._drag_position
        before = (vp.left, vp.top, vp.width, vp.height)

        if position == "center":
            if self.scroll_direction != Direction.VERTICAL:
                vp.left = left + dfx
            if self.scroll_direction != Direction.HORIZONTAL:
                vp.top = top + dfy
        else:
            if "left" in position:
                dfx = max(-left, min(dfx, width - vp.zoom_in_width_limit))
                vp.left, vp.width = left + dfx, width - dfx
            elif "right" in position:
                dfx = max(vp.zoom_in_width_limit - width, min(dfx, 1.0 - left - width))
                vp.width = width + dfx
            if "top" in position:
                dfy = max(-top, min(dfy, height - vp.zoom_in_height_limit))
                vp.top, vp.height = top + dfy, height - dfy
            elif "bottom" in position:
                dfy = max(vp.zoom_in_height_limit - height, min(dfy, 1.0 - top - height))
                vp.height = height + dfy
        vp.validate()
        if (vp.left, vp.top, vp.width, vp.height) != before:
            self.need_update_chart = True

    def mouse_move(self, point: Point) -> CursorShape:
        """Move or resize the viewport while dragging; returns the cursor to show."""
        self.sync_state()
        x, y = self.scale.to_image_x(point.x), self.scale.to_image_y(point.y)
        vp = self._viewport
        if self._drag_position is not None and vp is not None:
            if self._dragging or self.is_drag(point):
                self._dragging = True
                self._apply_drag(vp, x, y)
            position: str | None = self._drag_position
        else:
            position = self._hit(x, y)

        changed = self.need_update_chart
        self._update_chart_viewer_if_necessary()
        self.cursor = cursor_for_position(position)
        if changed:
            self.update_display()
        return self.cursor

    def mouse_up(self, point: Point) -> bool:
        """Finish a move or resize; returns whether a press had been taken."""
        self.sync_state()
        if self._drag_position is None:
            return False
        if self._dragging:
            self.need_update_image_map = True
        self._drag_position = None
        self._drag_start = None
        self._dragging = False
        self._update_chart_viewer_if_necessary()
        return True

    def mouse_wheel(self, point: Point, delta: int) -> bool:
        """Ask the viewer to zoom around its plot area's centre; returns whether it did."""
        x, y = self.scale.to_image_x(point.x), self.scale.to_image_y(point.y)
        if self.viewer is None or not self.is_on_plot_area(x, y):
            return False
        plot = self.viewer.plot_area
        cx = plot.left + plot.width // 2
        cy = plot.top + plot.height // 2
        return self.viewer.mouse_wheel_zoom(cx, cy, delta)

    def _update_chart_viewer_if_necessary(self) -> None:
        if self.viewer is None:
            return
        if self.need_update_chart or self.need_update_image_map:
            self.viewer.update_view_port(self.need_update_chart, self.need_update_image_map)
        self.need_update_chart = False
        self.need_update_image_map = False