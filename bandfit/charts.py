"""Charts comparing NG and OK fit results: scatter and box plots."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from matplotlib.figure import Figure
from matplotlib.ticker import FormatStrFormatter

CHART_WIDTH = 800
CHART_HEIGHT = 600
_DPI = 100

NG_COLOR = "#ff0000"
OK_COLOR = "#00cc00"
NG_BOX_COLOR = "#ff6666"
OK_BOX_COLOR = "#66cc66"
MARKER_SIZE = 9

ZOOM_FACTOR = 0.1
MIN_VIEW_SIZE = 0.1
MIN_MARGIN = 0.5


def estimate_step(min_val: float, max_val: float, desired_steps: int = 10) -> float:
    """A round tick spacing (1, 2, 5 or 10 times a power of ten) for the range."""
    span = max_val - min_val
    if span <= 0:
        return 1.0
    rough = span / desired_steps
    base = 10.0 ** math.floor(math.log10(rough))
    fraction = rough / base
    if fraction < 1.5:
        nice = 1.0
    elif fraction < 3:
        nice = 2.0
    elif fraction < 7:
        nice = 5.0
    else:
        nice = 10.0
    return nice * base


@dataclass(frozen=True)
class BoxStats:
    """Five-number summary used to draw one box."""

    minimum: float = 0.0
    q1: float = 0.0
    median: float = 0.0
    q3: float = 0.0
    maximum: float = 0.0


def box_stats(data: Sequence[float]) -> BoxStats:
    """Summary taken at sorted positions n/4, n/2 and 3n/4; all zero when empty."""
    ordered = sorted(data)
    n = len(ordered)
    if n == 0:
        return BoxStats()
    return BoxStats(
        minimum=ordered[0],
        q1=ordered[n // 4],
        median=ordered[n // 2],
        q3=ordered[(3 * n) // 4],
        maximum=ordered[-1],
    )


def y_axis_range(ng: Sequence[float], ok: Sequence[float]) -> tuple[float, float, float]:
    """Lower bound, upper bound and tick step of the box chart's value axis."""
    ng_stats, ok_stats = box_stats(ng), box_stats(ok)
    low = min(ng_stats.minimum, ok_stats.minimum)
    high = max(ng_stats.maximum, ok_stats.maximum)
    margin = max(MIN_MARGIN, (high - low) * 0.1)
    lower, upper = low - margin, high + margin
    return lower, upper, estimate_step(lower, upper)


@dataclass
class Viewport:
    """Visible part of a chart as fractions of its full extent."""

    left: float = 0.0
    top: float = 0.0
    width: float = 1.0
    height: float = 1.0

    def zoom(self, delta: int) -> None:
        """Zoom by 10% around the centre: in for positive ``delta``, out otherwise."""
        centre_x = self.left + self.width / 2
        centre_y = self.top + self.height / 2
        factor = 1 - ZOOM_FACTOR if delta > 0 else 1 + ZOOM_FACTOR
        width = min(max(self.width * factor, MIN_VIEW_SIZE), 1.0)
        height = min(max(self.height * factor, MIN_VIEW_SIZE), 1.0)

        left = max(centre_x - width / 2, 0.0)
        top = max(centre_y - height / 2, 0.0)
        if left + width > 1:
            left = 1 - width
        if top + height > 1:
            top = 1 - height

        self.left, self.top, self.width, self.height = left, top, width, height


def _new_figure(title: str | None):
    fig = Figure(figsize=(CHART_WIDTH / _DPI, CHART_HEIGHT / _DPI), dpi=_DPI)
    ax = fig.add_subplot(1, 1, 1)
    if title:
        ax.set_title(title)
    return fig, ax


def scatter_chart(
    ng: Sequence[float], ok: Sequence[float], title: str | None = None
) -> Figure:
    """Scatter of the NG and OK values against their 1-based row index.

    The index runs over the NG values; OK values beyond it are not shown.
    """
    fig, ax = _new_figure(title)
    xs = [float(i) for i in range(1, len(ng) + 1)]
    ok_points = list(zip(xs, ok))
    ax.scatter(xs, list(ng), marker="x", s=MARKER_SIZE**2, color=NG_COLOR, label="NG")
    ax.scatter(
        [x for x, _ in ok_points],
        [y for _, y in ok_points],
        marker="o",
        s=MARKER_SIZE**2,
        color=OK_COLOR,
        label="OK",
    )
    ax.set_xlabel("Index")
    ax.set_ylabel("value")
    ax.legend(loc="upper left", frameon=False)
    return fig


def box_chart(
    ng: Sequence[float], ok: Sequence[float], title: str | None = None
) -> Figure:
    """Box-and-whisker plot of the NG and OK values side by side."""
    fig, ax = _new_figure(title)
    stats = []
    for label, values in (("NG", ng), ("OK", ok)):
        s = box_stats(values)
        stats.append(
            {
                "label": label,
                "whislo": s.minimum,
                "q1": s.q1,
                "med": s.median,
                "q3": s.q3,
                "whishi": s.maximum,
                "fliers": [],
            }
        )
    artists = ax.bxp(stats, patch_artist=True, showfliers=False)
    for box, color in zip(artists["boxes"], (NG_BOX_COLOR, OK_BOX_COLOR)):
        box.set_facecolor(color)

    ax.set_xlabel("Group")
    ax.set_ylabel("Value")

    lower, upper, step = y_axis_range(ng, ok)
    ax.set_yticks(np.arange(lower, upper + step / 2, step))
    ax.set_ylim(lower, upper)
    ax.yaxis.set_major_formatter(FormatStrFormatter("%.2f"))
    return fig