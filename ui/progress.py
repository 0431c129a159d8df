# ui/progress.py

from typing import List

from core.models import DayAggregate, DayStatus

def progress_bar(percent: float, length: int = 12):
    """Генерирует текстовый progress bar (emoji/блоки)"""
    clamped = max(0.0, min(percent, 100.0))
    done = int(length * clamped // 100)
    todo = length - done
    return "🟩" * done + "⬜️" * todo + f" {percent:.1f}%"

def streak_emoji(streak: int):
    if streak >= 30:
        return "🏆"
    elif streak >= 7:
        return "🔥"
    elif streak >= 3:
        return "✨"
    else:
        return "🔹"

STATUS_MARKS = {
    DayStatus.DONE: "🏆",
    DayStatus.NOT_DONE: "❌",
    DayStatus.UNANSWERED: "·",
}

AGGREGATE_DOTS = {
    DayAggregate.ALL: "🟢",
    DayAggregate.SOME: "🟡",
    DayAggregate.NONE: "⚪",
}

def week_row(labels: List[str], marks: List[str]) -> str:
    header = " ".join(f"{label:>3}" for label in labels)
    body = " ".join(f"{mark:>3}" for mark in marks)
    return f"{header}\n{body}"
