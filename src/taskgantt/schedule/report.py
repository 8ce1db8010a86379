from __future__ import annotations

from typing import Optional

from .types import GanttCell, GanttSchedule


def format_cell(cell: Optional[GanttCell]) -> str:
    if cell is None:
        return ""
    if cell.phase == "compute":
        return str(cell.task_id)
    return f"{cell.task_id} {cell.phase}"


def build_schedule_table(schedule: GanttSchedule) -> tuple[list[str], list[list[str]]]:
    """Header and body rows for rendering; the first column is the time index."""

    header = ["Time"] + [f"P{index}" for index in range(schedule.worker_count)]
    body = [
        [str(time)] + [format_cell(cell) for cell in row]
        for time, row in enumerate(schedule.rows)
    ]
    return header, body


def render_text_table(schedule: GanttSchedule) -> str:
    header, body = build_schedule_table(schedule)
    widths = [len(title) for title in header]
    for row in body:
        for col, text in enumerate(row):
            widths[col] = max(widths[col], len(text))

    def line(values: list[str]) -> str:
        return " | ".join(value.ljust(widths[col]) for col, value in enumerate(values)).rstrip()

    lines = [line(header), "-+-".join("-" * width for width in widths)]
    lines.extend(line(row) for row in body)
    if schedule.stalled:
        lines.append(f"stalled; pending tasks: {', '.join(str(t) for t in schedule.pending)}")
    return "\n".join(lines)
