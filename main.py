#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Daya Tracker v1.0 - Command Line Interface
Отметки привычек, прогресс Сехадж Паатх, виджет и экспорт

Использование: python main.py [--log-file PATH] <command> [options]

Версия: 1.0.0
Дата: 2026-10-19
"""

import sys
import time
import argparse
import logging
from datetime import date
from typing import Optional

from config import config
from core.habit_tracker import BinaryHabitTracker
from core.models import SEHAJ_PAATH_ID, ValidationError
from core.store import open_default_store
from services.data_export import build_history_rows, export_to_csv, export_to_json
from services.live_activity import LiveActivityService
from services.progress_service import ProgressService
from services.scheduler import RefreshScheduler
from services.widget_service import WidgetService
from ui.progress import AGGREGATE_DOTS, STATUS_MARKS, progress_bar, streak_emoji, week_row
from utils.datetime_utils import add_days, date_key, format_date, parse_date_key
from utils.logger import configure_logging, setup_logger

logger = logging.getLogger(__name__)

# ===== ARGUMENTS =====

def date_arg(value: str) -> date:
    try:
        return parse_date_key(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Неверный формат даты (нужен YYYY-MM-DD): {value}")

def month_arg(value: str):
    try:
        year, month = (int(part) for part in value.split("-"))
        date(year, month, 1)
        return year, month
    except ValueError:
        raise argparse.ArgumentTypeError(f"Неверный месяц (нужен YYYY-MM): {value}")

def create_parser():
    """Создание парсера аргументов"""
    parser = argparse.ArgumentParser(
        prog='daya',
        description='Трекер ежедневных привычек: Morning Simran, Sehaj Paath и свои привычки.',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--log-file', help='Дополнительно писать лог в файл')

    sub = parser.add_subparsers(dest='command', required=True)

    sub.add_parser('status', help='Состояние на сегодня')

    mark = sub.add_parser('mark', help='Отметить привычку')
    mark.add_argument('habit_id')
    mark.add_argument('answer', choices=['done', 'not-done'])
    mark.add_argument('--date', type=date_arg)

    clear = sub.add_parser('clear', help='Снять отметку (без ответа)')
    clear.add_argument('habit_id')
    clear.add_argument('--date', type=date_arg)

    angs = sub.add_parser('angs', help='Анги Сехадж Паатх за день')
    angs.add_argument('count', type=int)
    angs.add_argument('--date', type=date_arg)

    target = sub.add_parser('target', help='Целевая дата окончания (или none)')
    target.add_argument('value')

    week = sub.add_parser('week', help='Неделя с воскресенья')
    week.add_argument('habit_id', nargs='?', default='morning_simran')
    week.add_argument('--date', type=date_arg)

    cal = sub.add_parser('calendar', help='Месяц: все / некоторые привычки выполнены')
    cal.add_argument('--month', type=month_arg)

    habits = sub.add_parser('habits', help='Управление привычками')
    habits_sub = habits.add_subparsers(dest='habits_command', required=True)
    habits_sub.add_parser('list')
    add = habits_sub.add_parser('add')
    add.add_argument('name')
    add.add_argument('--emoji', default='')
    toggle = habits_sub.add_parser('toggle')
    toggle.add_argument('habit_id')
    delete = habits_sub.add_parser('delete')
    delete.add_argument('habit_id')
    move = habits_sub.add_parser('move')
    move.add_argument('from_index', type=int)
    move.add_argument('to_offset', type=int)

    widget = sub.add_parser('widget', help='Снимок виджета')
    widget.add_argument('--watch', action='store_true', help='Обновлять по расписанию')

    export = sub.add_parser('export', help='Экспорт истории')
    export.add_argument('--format', choices=['json', 'csv'], default='json')
    export.add_argument('--days', type=int, default=30)

    reset = sub.add_parser('reset', help='Удалить все данные привычек')
    reset.add_argument('--yes', action='store_true', help='Подтверждение')

    return parser

# ===== COMMANDS =====

def cmd_status(progress: ProgressService, args) -> int:
    today = progress.clock()
    print(f"\n{format_date(today, '%A, %b %d, %Y')}")
    print("=" * 40)

    for habit in progress.registry.visible_habits():
        tracker = progress.tracker_for(habit.id)
        if habit.id == SEHAJ_PAATH_ID:
            print(f"{habit.emoji} {habit.name}: {tracker.today_delta()} angs today")
        else:
            status = tracker.status(today)
            habit_streak = tracker.streak()
            print(f"{habit.emoji} {habit.name}: {STATUS_MARKS[status]} "
                  f"streak {habit_streak} {streak_emoji(habit_streak)}")

    summary = progress.reading.summary()
    print("\nSehaj Paath")
    print(f"  {progress_bar(summary.percent_complete)}")
    print(f"  Ang {summary.total_read} of {summary.target_total}, average {summary.daily_average:.1f}/day")
    if summary.estimated_completion_date:
        print(f"  Estimated finish: {format_date(summary.estimated_completion_date)}")
    else:
        print("  Estimated finish: not enough data")
    if summary.target_date:
        print(f"  Target: {format_date(summary.target_date)}, "
              f"need {summary.required_daily_pace:.1f} angs/day")
        if summary.ahead_of_schedule:
            print("  Ahead of schedule")

    streak = progress.combined_streak()
    print(f"\nCombined streak: {streak} {streak_emoji(streak)}\n")
    return 0

def _binary_tracker(progress: ProgressService, habit_id: str) -> Optional[BinaryHabitTracker]:
    if habit_id == SEHAJ_PAATH_ID:
        print("Sehaj Paath отмечается количеством ангов: используйте команду angs")
        return None
    if progress.registry.get(habit_id) is None:
        print(f"Привычка не найдена: {habit_id}")
        return None
    return progress.tracker_for(habit_id)

def cmd_mark(progress: ProgressService, args) -> int:
    tracker = _binary_tracker(progress, args.habit_id)
    if tracker is None:
        return 1
    tracker.mark(args.date or progress.clock(), args.answer == 'done')
    return 0

def cmd_clear(progress: ProgressService, args) -> int:
    tracker = _binary_tracker(progress, args.habit_id)
    if tracker is None:
        return 1
    tracker.clear(args.date or progress.clock())
    return 0

def cmd_angs(progress: ProgressService, args) -> int:
    progress.reading.set_daily_delta(args.date or progress.clock(), args.count)
    print(f"Total read: {progress.reading.total_to_date()}")
    return 0

def cmd_target(progress: ProgressService, args) -> int:
    if args.value.lower() == 'none':
        progress.reading.target_date = None
    else:
        try:
            progress.reading.target_date = parse_date_key(args.value)
        except ValueError:
            print(f"Неверный формат даты: {args.value}")
            return 1
    return 0

def cmd_week(progress: ProgressService, args) -> int:
    if args.habit_id == SEHAJ_PAATH_ID:
        records = progress.reading.week_window(args.date)
        marks = ["🏆" if r.completed else "·" for r in records]
    else:
        tracker = _binary_tracker(progress, args.habit_id)
        if tracker is None:
            return 1
        records = tracker.week_window(args.date)
        marks = [STATUS_MARKS[r.status] for r in records]
    print(week_row([r.day_label for r in records], marks))
    return 0

def cmd_calendar(progress: ProgressService, args) -> int:
    today = progress.clock()
    year, month = args.month or (today.year, today.month)
    records = progress.month_overview(year, month)
    print(f"\n{format_date(date(year, month, 1), '%B %Y')}")
    print(" ".join(f"{label:>3}" for label in ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")))

    cells = ["   "] * ((records[0].date.weekday() + 1) % 7)
    for record in records:
        cells.append(f"{record.date.day:>2}{AGGREGATE_DOTS[record.aggregate]}")
    for i in range(0, len(cells), 7):
        print(" ".join(cells[i:i + 7]))
    print(f"\nCombined streak: {progress.combined_streak()} 🔥\n")
    return 0

def cmd_habits(progress: ProgressService, args) -> int:
    registry = progress.registry
    if args.habits_command == 'add':
        habit = registry.add_habit(args.name, args.emoji)
        print(f"Added {habit.name}: {habit.id}")
    elif args.habits_command == 'toggle':
        registry.toggle_visibility(args.habit_id)
    elif args.habits_command == 'delete':
        registry.delete_habit(args.habit_id)
    elif args.habits_command == 'move':
        registry.move_habit([args.from_index], args.to_offset)

    for index, habit in enumerate(registry.habits):
        visibility = "visible" if habit.is_visible else "hidden"
        system = ", system" if habit.is_system else ""
        print(f"{index}. {habit.emoji} {habit.name} [{habit.id}] ({visibility}{system})")
    return 0

def cmd_widget(progress: ProgressService, args, store) -> int:
    widget_service = WidgetService(progress)
    live_activity = LiveActivityService(progress)

    if not args.watch:
        print(widget_service.build_entry().model_dump_json(indent=2))
        print(f"Live activity: {live_activity.next_action(has_active=False).value}")
        return 0

    scheduler = RefreshScheduler(widget_service, store=store)
    scheduler.add_listener(lambda entry: print(entry.model_dump_json()))
    scheduler.start()
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        logger.info("Stopping widget refresh")
    finally:
        scheduler.shutdown()
    return 0

def cmd_export(progress: ProgressService, args) -> int:
    end = progress.clock()
    start = add_days(end, -(max(1, args.days) - 1))
    rows = build_history_rows(progress, start, end)
    name = f"history_{date_key(start)}_{date_key(end)}"
    if args.format == 'csv':
        filename = export_to_csv(rows, config.export_dir, name)
    else:
        filename = export_to_json(rows, config.export_dir, name)
    print(f"Exported to: {filename}")
    return 0

def cmd_reset(progress: ProgressService, args) -> int:
    if not args.yes:
        print("Сброс удалит все отметки и прогресс. Повторите с --yes")
        return 1
    removed = progress.reset_all_data()
    print(f"Removed {removed} records")
    return 0

COMMANDS = {
    'status': cmd_status,
    'mark': cmd_mark,
    'clear': cmd_clear,
    'angs': cmd_angs,
    'target': cmd_target,
    'week': cmd_week,
    'calendar': cmd_calendar,
    'habits': cmd_habits,
    'export': cmd_export,
    'reset': cmd_reset,
}

def main(argv=None):
    """Main entry point for the application."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging(config)
    if args.log_file:
        setup_logger(args.log_file)

    try:
        config.ensure_directories()
    except OSError as e:
        logger.warning(f"Cannot create data directories, falling back to defaults: {e}")
    store = open_default_store(config)
    progress = ProgressService(store)

    try:
        if args.command == 'widget':
            return cmd_widget(progress, args, store)
        return COMMANDS[args.command](progress, args)
    except ValidationError as e:
        print(f"\nData Validation Error: {e}\n", flush=True)
        return 1

if __name__ == '__main__':
    sys.exit(main())
