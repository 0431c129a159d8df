# services/data_export.py

import json
import csv
from datetime import date
from pathlib import Path
from typing import Any, Dict, List

from core.models import SEHAJ_PAATH_ID
from services.progress_service import ProgressService
from utils.datetime_utils import add_days, date_key

def build_history_rows(progress: ProgressService, start: date, end: date) -> List[Dict[str, Any]]:
    """Строка на каждый день: статус каждой привычки и анги за день"""
    habits = [h for h in progress.registry.habits if h.id != SEHAJ_PAATH_ID]
    rows = []
    current_date = start
    while current_date <= end:
        row = {"date": date_key(current_date)}
        for habit in habits:
            row[habit.id] = progress.binary_tracker(habit.id).status(current_date).value
        row["paath_angs"] = progress.reading.daily_delta(current_date)
        row["paath_completed"] = progress.reading.did_complete(current_date)
        rows.append(row)
        current_date = add_days(current_date, 1)
    return rows

def export_to_json(rows: List[Dict[str, Any]], export_dir: Path, name: str = "history"):
    export_dir.mkdir(parents=True, exist_ok=True)
    filename = export_dir / f"{name}.json"
    with open(filename, "w", encoding="utf-8") as f:
        json.dump(rows, f, ensure_ascii=False, indent=2)
    return filename

def export_to_csv(rows: List[Dict[str, Any]], export_dir: Path, name: str = "history"):
    if not rows:
        return None
    export_dir.mkdir(parents=True, exist_ok=True)
    filename = export_dir / f"{name}.csv"
    keys = rows[0].keys()
    with open(filename, "w", newline="", encoding="utf-8") as f:
        dict_writer = csv.DictWriter(f, keys)
        dict_writer.writeheader()
        dict_writer.writerows(rows)
    return filename
