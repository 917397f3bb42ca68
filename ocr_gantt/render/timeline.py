"""Timeline (Gantt) rendering with matplotlib.

Draws one horizontal bar per task from its start to its end date
(inclusive), shading the completed share by ``progress``, and returns the
chart as PNG bytes.
"""

import io
import math
from datetime import date, timedelta

import matplotlib
import matplotlib.dates as mdates
from matplotlib.backends.backend_agg import FigureCanvasAgg
from matplotlib.figure import Figure

from ocr_gantt.schedule.derive import Task
from ocr_gantt.utils.config import ChartConfig
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)

VIEW_MODES = ("day", "week", "month")

_LABELS = {
    "ja": {"title": "工程表", "axis": "日付", "progress": "進捗"},
    "en": {"title": "Schedule", "axis": "Date", "progress": "Progress"},
}

_BAR_COLOR = "#a3a3ff"
_PROGRESS_COLOR = "#5151d6"
_LABEL_AREA_PX = 220


def _column_count(first: date, last: date, view_mode: str) -> int:
    days = (last - first).days + 1
    if view_mode == "week":
        return math.ceil(days / 7)
    if view_mode == "month":
        return (last.year - first.year) * 12 + last.month - first.month + 1
    return days


def _locator(view_mode: str) -> mdates.DateLocator:
    if view_mode == "week":
        return mdates.WeekdayLocator(byweekday=mdates.MO)
    if view_mode == "month":
        return mdates.MonthLocator()
    return mdates.DayLocator()


class TimelineRenderer:
    """Renders a task list as a PNG timeline.

    Args:
        config: Chart options. ``view_mode`` sets the tick granularity,
            ``column_width`` the pixel width of one tick column.

    Raises:
        ValueError: If ``view_mode`` is not Day, Week or Month.
    """

    def __init__(self, config: ChartConfig) -> None:
        self.config = config
        self.view_mode = config.view_mode.lower()
        if self.view_mode not in VIEW_MODES:
            raise ValueError(f"Unsupported view mode: {config.view_mode}")
        self.labels = _LABELS.get(config.locale, _LABELS["en"])

    def render(self, tasks: list[Task]) -> bytes:
        """Draw the timeline for ``tasks``.

        Raises:
            ValueError: If ``tasks`` is empty.
        """
        if not tasks:
            raise ValueError("No tasks to render")

        first = min(t.start_date for t in tasks)
        last = max(t.end_date for t in tasks)
        columns = _column_count(first, last, self.view_mode)

        # column_width is in pixels at the 100 dpi layout scale; savefig
        # upsamples to the configured dpi
        width_in = (_LABEL_AREA_PX + columns * self.config.column_width) / 100
        height_in = 1.5 + len(tasks) * self.config.row_height

        with matplotlib.rc_context({"font.family": self.config.font_family}):
            fig = Figure(figsize=(width_in, height_in), dpi=100)
            FigureCanvasAgg(fig)
            ax = fig.add_subplot(1, 1, 1)
            self._draw_bars(ax, tasks)
            self._format_axes(ax, tasks, first, last)
            fig.tight_layout()

            buf = io.BytesIO()
            fig.savefig(buf, format="png", dpi=self.config.dpi)

        logger.info(
            "Rendered %d tasks over %d %s columns", len(tasks), columns, self.view_mode
        )
        return buf.getvalue()

    def _draw_bars(self, ax, tasks: list[Task]) -> None:
        for y, task in enumerate(tasks):
            left = mdates.date2num(task.start_date)
            # inclusive end: a task ending on day D fills D as well
            length = max((task.end_date - task.start_date).days + 1, 1)
            ax.barh(y, length, left=left, height=0.6, color=_BAR_COLOR)
            if task.progress > 0:
                ax.barh(
                    y,
                    length * task.progress / 100,
                    left=left,
                    height=0.6,
                    color=_PROGRESS_COLOR,
                )
            ax.text(
                left + length,
                y,
                f" {task.progress:g}%",
                va="center",
                fontsize=7,
            )

    def _format_axes(self, ax, tasks: list[Task], first: date, last: date) -> None:
        ax.set_yticks(range(len(tasks)))
        ax.set_yticklabels([t.name for t in tasks])
        ax.invert_yaxis()

        ax.set_xlim(
            mdates.date2num(first),
            mdates.date2num(last + timedelta(days=1)),
        )
        ax.xaxis.set_major_locator(_locator(self.view_mode))
        ax.xaxis.set_major_formatter(mdates.DateFormatter(self.config.date_format))
        for label in ax.get_xticklabels():
            label.set_rotation(60)
            label.set_horizontalalignment("right")
            label.set_fontsize(7)

        ax.grid(axis="x", linestyle=":", linewidth=0.5)
        ax.set_xlabel(self.labels["axis"])
        ax.set_title(self.labels["title"])
