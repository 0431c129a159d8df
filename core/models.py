#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Daya Tracker v1.0 - Core Data Models
Модели данных с валидацией и типизацией

Версия: 1.0.0
Дата: 2026-10-19
"""

import uuid
from datetime import date
from typing import Dict, Optional, Any
from dataclasses import dataclass, asdict
from enum import Enum
import logging

from utils.datetime_utils import weekday_label

logger = logging.getLogger(__name__)

# ===== ENUMS =====

class DayStatus(Enum):
    """Ответ за день"""
    DONE = "done"
    NOT_DONE = "not_done"
    UNANSWERED = "unanswered"

    @classmethod
    def from_stored(cls, value: Optional[bool]) -> "DayStatus":
        if value is True:
            return cls.DONE
        if value is False:
            return cls.NOT_DONE
        return cls.UNANSWERED

class DayAggregate(Enum):
    """Точка в календаре: все / некоторые / ни одна привычка"""
    ALL = "all"
    SOME = "some"
    NONE = "none"

class LiveActivityAction(Enum):
    """Действие над live activity после пересчёта"""
    START = "start"
    UPDATE = "update"
    END = "end"

# ===== VALIDATION HELPERS =====

class ValidationError(Exception):
    """Ошибка валидации данных"""
    pass

class InvalidArgumentError(ValidationError):
    """Недопустимый аргумент операции (например, отрицательное число ангов)"""
    pass

def validate_text(text: str, min_length: int = 1, max_length: int = 100, field_name: str = "text") -> str:
    """Валидация текстовых полей"""
    if not isinstance(text, str):
        raise InvalidArgumentError(f"{field_name} должен быть строкой")

    text = text.strip()
    if len(text) < min_length:
        raise InvalidArgumentError(f"{field_name} должен содержать минимум {min_length} символов")

    if len(text) > max_length:
        raise InvalidArgumentError(f"{field_name} должен содержать максимум {max_length} символов")

    return text

def validate_count(count: Any, field_name: str = "count") -> int:
    """Неотрицательное целое"""
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidArgumentError(f"{field_name} должен быть целым числом, получено {count!r}")
    if count < 0:
        raise InvalidArgumentError(f"{field_name} не может быть отрицательным, получено {count}")
    return count

# ===== DAY RECORDS =====

@dataclass(frozen=True)
class DayRecord:
    """День бинарной привычки"""
    date: date
    status: DayStatus

    @property
    def day_label(self) -> str:
        return weekday_label(self.date)

    @property
    def completed(self) -> Optional[bool]:
        """True / False / None (без ответа)"""
        if self.status == DayStatus.UNANSWERED:
            return None
        return self.status == DayStatus.DONE

@dataclass(frozen=True)
class ReadingDayRecord:
    """День Сехадж Паатх"""
    date: date
    angs: int

    @property
    def completed(self) -> bool:
        return self.angs > 0

    @property
    def day_label(self) -> str:
        return weekday_label(self.date)

@dataclass(frozen=True)
class CombinedDayRecord:
    """День по нескольким привычкам сразу"""
    date: date
    aggregate: DayAggregate

    @property
    def all_completed(self) -> bool:
        return self.aggregate == DayAggregate.ALL

    @property
    def day_label(self) -> str:
        return weekday_label(self.date)

# ===== HABITS =====

MORNING_SIMRAN_ID = "morning_simran"
SEHAJ_PAATH_ID = "sehaj_paath"

@dataclass
class Habit:
    """Определение привычки"""
    id: str
    name: str
    emoji: str = ""
    is_visible: bool = True
    is_system: bool = False

    def __post_init__(self):
        self.name = validate_text(self.name, field_name="name")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Habit":
        try:
            return cls(
                id=str(data["id"]),
                name=data["name"],
                emoji=data.get("emoji", ""),
                is_visible=bool(data.get("is_visible", True)),
                is_system=bool(data.get("is_system", False))
            )
        except (KeyError, TypeError) as e:
            raise ValidationError(f"Не удалось загрузить привычку: {e}")

    @classmethod
    def create(cls, name: str, emoji: str = "") -> "Habit":
        """Новая пользовательская привычка"""
        return cls(id=str(uuid.uuid4()), name=name, emoji=emoji)

    @classmethod
    def morning_simran(cls) -> "Habit":
        return cls(id=MORNING_SIMRAN_ID, name="Morning Simran", emoji="🏆", is_system=True)

    @classmethod
    def sehaj_paath(cls) -> "Habit":
        return cls(id=SEHAJ_PAATH_ID, name="Sehaj Paath", emoji="📖", is_system=True)

# ===== PROGRESS =====

@dataclass(frozen=True)
class ProgressSummary:
    """Сводка прогресса Сехадж Паатх на дату"""
    as_of: date
    start_date: Optional[date]
    total_read: int
    target_total: int
    percent_complete: float
    daily_average: float
    estimated_completion_date: Optional[date] = None
    target_date: Optional[date] = None
    required_daily_pace: Optional[float] = None

    @property
    def remaining(self) -> int:
        return self.target_total - self.total_read

    @property
    def ahead_of_schedule(self) -> bool:
        """Цель уже достигнута, требуемый темп неположителен"""
        return self.required_daily_pace is not None and self.required_daily_pace <= 0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in ("as_of", "start_date", "estimated_completion_date", "target_date"):
            if data[key] is not None:
                data[key] = data[key].isoformat()
        data["remaining"] = self.remaining
        data["ahead_of_schedule"] = self.ahead_of_schedule
        return data
