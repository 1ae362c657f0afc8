"""Coordinate conversion and geometry for the interactive chart view."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import IntEnum

DEFAULT_DPI = 96
MIN_DPI = 24
MAX_DPI = 384


class Direction(IntEnum):
    """Axes along which zooming or scrolling is allowed."""

    HORIZONTAL = 0
    VERTICAL = 1
    BOTH = 2
    KEEP_ASPECT_RATIO = 3


@dataclass(frozen=True)
class Point:
    """A position in display pixels."""

    x: int
    y: int


@dataclass(frozen=True)
class Rect:
    """An axis-aligned rectangle given by its top-left corner and size."""

    left: int
    top: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.left + self.width

    @property
    def bottom(self) -> int:
        return self.top + self.height


def _round_half_away(value: float) -> int:
    return int(value + 0.5) if value >= 0 else int(value - 0.5)


@dataclass(frozen=True)
class ImageScale:
    """Ratio between chart image pixels and display pixels on each axis."""

    scale_x: float = 1.0
    scale_y: float = 1.0

    @classmethod
    def from_sizes(
        cls, image_width: int, image_height: int, client_width: int, client_height: int
    ) -> ImageScale:
        """Scale that maps a client area of the given size onto an image."""
        if client_width <= 0 or client_height <= 0:
            raise ValueError("client area must have a positive size")
        return cls(image_width / client_width, image_height / client_height)

    def to_image_x(self, x: float) -> float:
        return x * self.scale_x

    def to_image_y(self, y: float) -> float:
        return y * self.scale_y

    def to_display_x(self, x: float) -> int:
        return _round_half_away(x / self.scale_x)

    def to_display_y(self, y: float) -> int:
        return _round_half_away(y / self.scale_y)


def clamp_dpi(dpi: int, detected: int = DEFAULT_DPI) -> int:
    """Effective DPI: negative means the default, zero means the detected value."""
    if dpi < 0:
        return DEFAULT_DPI
    if dpi == 0:
        dpi = detected
    return max(MIN_DPI, min(MAX_DPI, dpi))


def bgr_to_rgb(color: int) -> int:
    """Swap the red and blue bytes of a 0x00BBGGRR colour."""
    return ((color & 0xFF) << 16) | (color & 0xFF00) | ((color & 0xFF0000) >> 16)


def normalize_rect(x: int, y: int, width: int, height: int) -> Rect:
    """Rectangle with non-negative size; negative sizes extend left or up."""
    if width < 0:
        width = -width
        x -= width
    if height < 0:
        height = -height
        y -= height
    return Rect(x, y, width, height)


def selection_edges(rect: Rect, line_width: int) -> tuple[Rect, Rect, Rect, Rect]:
    """The top, left, bottom and right bars that outline a selection box."""
    top = Rect(rect.left, rect.top, rect.width, line_width)
    left = Rect(rect.left, rect.top, line_width, rect.height)
    bottom = Rect(rect.left, rect.bottom - line_width + 1, rect.width, line_width)
    right = Rect(rect.right - line_width + 1, rect.top, line_width, rect.height)
    return top, left, bottom, right


def is_drag(direction: Direction, start: Point, point: Point, min_drag: int) -> bool:
    """Whether the mouse has moved far enough along an allowed axis to count as a drag."""
    span_x = abs(point.x - start.x)
    span_y = abs(point.y - start.y)
    return (direction != Direction.VERTICAL and span_x >= min_drag) or (
        direction != Direction.HORIZONTAL and span_y >= min_drag
    )


def drag_zoom_rect(
    start: Point,
    point: Point,
    scale: ImageScale,
    plot_width: int,
    plot_height: int,
    keep_aspect: bool = False,
) -> Rect:
    """Display rectangle spanned by a zoom drag from ``start`` to ``point``.

    With ``keep_aspect`` the rectangle is grown to the plot area's aspect ratio,
    anchored at the drag's starting corner.
    """
    x = min(point.x, start.x)
    y = min(point.y, start.y)
    width = abs(point.x - start.x)
    height = abs(point.y - start.y)

    if keep_aspect:
        if plot_height == 0:
            raise ValueError("plot area height must not be zero")
        ratio = plot_width / plot_height
        delta = scale.to_image_x(width) - scale.to_image_y(height) * ratio
        if delta < 0:
            width = scale.to_display_x(scale.to_image_y(height) * ratio)
        elif delta > 0:
            height = scale.to_display_y(scale.to_image_x(width) / ratio)
        if x == point.x:
            x = start.x - width
        if y == point.y:
            y = start.y - height

    return Rect(x, y, width, height)


def cursor_extent(
    pixels: Sequence[int], width: int, height: int, color: bool
) -> tuple[int, int]:
    """Rows bounding the visible part of a cursor bitmap, as ``(top, bottom)``.

    ``pixels`` are 32-bit values in bottom-up row order. A colour cursor is
    visible where its alpha byte is set; a monochrome cursor holds an AND mask
    followed by an XOR mask, each half of ``height``, and is visible wherever it
    is not transparent (AND 0x00 with XOR 0xff).
    """
    if width <= 0:
        raise ValueError("bitmap width must be positive")
    height = abs(height)
    size = width * height
    if len(pixels) < size:
        raise ValueError(f"expected {size} pixels, got {len(pixels)}")

    if color:
        visible = [i for i in range(size) if (pixels[i] >> 24) & 0xFF]
        rows = height
    else:
        half = size // 2
        visible = [
            i
            for i in range(half)
            if (pixels[i] & 0xFF) != 0x00 or (pixels[i + half] & 0xFF) != 0xFF
        ]
        rows = height // 2

    if not visible:
        return 0, rows
    top = rows - visible[-1] // width - 1
    bottom = rows - visible[0] // width
    return top, bottom


def tooltip_position(
    cursor: Point,
    tip_size: tuple[int, int],
    client: Rect,
    top_offset: int,
    bottom_offset: int,
    hotspot_y: int,
) -> Point:
    """Where to place a tooltip near the cursor, kept inside the client area.

    The tip goes below the cursor's visible part when it fits, else above it.
    """
    tip_width, tip_height = tip_size
    x, y = cursor.x, cursor.y

    if x + tip_width > client.right:
        x = max(0, client.right - tip_width)

    if y + bottom_offset - hotspot_y + tip_height > client.bottom:
        y = max(0, y - tip_height + top_offset - hotspot_y - 2)
    else:
        y += bottom_offset - hotspot_y + 2
        y = min(y, client.bottom - client.top - tip_height)

    return Point(x, y)