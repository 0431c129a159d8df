#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Daya Tracker v1.0 - Key-Value Store
Хранилище ключ-значение с зеркалированием, резервным копированием
и деградацией к значениям по умолчанию

Версия: 1.0.0
Дата: 2026-10-19
"""

import os
import json
import base64
import shutil
import gzip
import threading
from abc import ABC, abstractmethod
from datetime import datetime, date
from pathlib import Path
from typing import Dict, List, Optional, Any
import logging

logger = logging.getLogger(__name__)

_MISSING = object()

# ===== EXCEPTIONS =====

class StoreError(Exception):
    """Базовое исключение для ошибок хранилища"""
    pass

class StoreUnavailableError(StoreError):
    """Хранилище недоступно (нет контейнера, нет прав)"""
    pass

class StoreCorruptionError(StoreError):
    """Ошибка повреждения данных"""
    pass

# ===== BASE STORE =====

class KeyValueStore(ABC):
    """Интерфейс хранилища: строковый ключ -> bool | int | date | bytes"""

    SUPPORTED_TYPES = (bool, int, date, bytes)

    @abstractmethod
    def get(self, key: str, default: Any = None) -> Any:
        """Значение по ключу или default"""

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """Записать значение"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Удалить ключ (отсутствующий ключ не является ошибкой)"""

    @abstractmethod
    def keys(self) -> List[str]:
        """Все ключи хранилища"""

    def contains(self, key: str) -> bool:
        return self.get(key, _MISSING) is not _MISSING

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        return value if isinstance(value, bool) else default

    def get_int(self, key: str, default: int = 0) -> int:
        value = self.get(key)
        if isinstance(value, bool):
            return int(value)
        return value if isinstance(value, int) else default

    def get_date(self, key: str, default: Optional[date] = None) -> Optional[date]:
        value = self.get(key)
        if isinstance(value, datetime):
            return value.date()
        return value if isinstance(value, date) else default

    def get_bytes(self, key: str, default: Optional[bytes] = None) -> Optional[bytes]:
        value = self.get(key)
        return value if isinstance(value, bytes) else default

    def remove_prefix(self, prefix: str) -> int:
        """Удалить все ключи с префиксом, вернуть количество удалённых"""
        matched = [key for key in self.keys() if key.startswith(prefix)]
        for key in matched:
            self.remove(key)
        return len(matched)

    def create_backup(self) -> Optional[Path]:
        """Резервная копия, если хранилище их поддерживает"""
        return None

    @classmethod
    def _check_value(cls, key: str, value: Any) -> None:
        if isinstance(value, datetime):
            raise TypeError(f"Store value for {key!r} must be a calendar date, not datetime")
        if not isinstance(value, cls.SUPPORTED_TYPES):
            raise TypeError(f"Unsupported store value type for {key!r}: {type(value).__name__}")

class InMemoryStore(KeyValueStore):
    """Хранилище в памяти (тесты, одноразовые вычисления)"""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._check_value(key, value)
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data.keys())

# ===== JSON FILE STORE =====

class BackupManager:
    """Менеджер резервных копий"""

    def __init__(self, backup_dir: Path, max_backups: int = 10, name: str = "defaults"):
        self.backup_dir = Path(backup_dir)
        self.max_backups = max_backups
        self.name = name

    def create_backup(self, source_file: Path, compressed: bool = True) -> Optional[Path]:
        """Создать резервную копию"""
        try:
            if not source_file.exists():
                logger.warning(f"Source file {source_file} does not exist for backup")
                return None

            self.backup_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime('%Y%m%d_%H%M%S_%f')
            backup_name = f"{self.name}_{timestamp}.json"

            if compressed:
                backup_name += ".gz"
                backup_path = self.backup_dir / backup_name

                with open(source_file, 'rb') as f_in:
                    with gzip.open(backup_path, 'wb') as f_out:
                        f_out.writelines(f_in)
            else:
                backup_path = self.backup_dir / backup_name
                shutil.copy2(source_file, backup_path)

            logger.info(f"Backup created: {backup_path}")
            self._cleanup_old_backups()
            return backup_path

        except OSError as e:
            logger.error(f"Failed to create backup: {e}")
            return None

    def restore_backup(self, backup_path: Path, target_file: Path) -> bool:
        """Восстановить из резервной копии"""
        try:
            if not backup_path.exists():
                logger.error(f"Backup file {backup_path} does not exist")
                return False

            if backup_path.name.endswith('.gz'):
                with gzip.open(backup_path, 'rb') as f_in:
                    with open(target_file, 'wb') as f_out:
                        f_out.writelines(f_in)
            else:
                shutil.copy2(backup_path, target_file)

            logger.info(f"Backup restored from {backup_path} to {target_file}")
            return True

        except OSError as e:
            logger.error(f"Failed to restore backup: {e}")
            return False

    def list_backups(self) -> List[Path]:
        """Резервные копии, от новых к старым"""
        if not self.backup_dir.exists():
            return []
        backups = list(self.backup_dir.glob(f"{self.name}_*.json*"))
        return sorted(backups, key=lambda p: p.name, reverse=True)

    def _cleanup_old_backups(self) -> None:
        """Удалить старые резервные копии"""
        for backup in self.list_backups()[self.max_backups:]:
            try:
                backup.unlink()
                logger.info(f"Removed old backup: {backup}")
            except OSError as e:
                logger.error(f"Failed to remove old backup {backup}: {e}")

class JsonFileStore(KeyValueStore):
    """Хранилище в JSON файле, общее для нескольких процессов.

    Файл перечитывается при изменении mtime, запись идёт через временный
    файл и атомарную замену. Даты и байты кодируются тегированными объектами.
    """

    VERSION_KEY = "__store_version__"
    CURRENT_VERSION = "1"

    def __init__(self, path: Path, backup_manager: Optional[BackupManager] = None):
        self.path = Path(path)
        self.backup_manager = backup_manager
        self.file_lock = threading.RLock()
        self._data: Dict[str, Any] = {}
        self._mtime: Optional[float] = None

    # ----- encoding -----

    @staticmethod
    def _encode(value: Any) -> Any:
        if isinstance(value, bool) or isinstance(value, int):
            return value
        if isinstance(value, date):
            return {"__type__": "date", "value": value.isoformat()}
        if isinstance(value, bytes):
            return {"__type__": "bytes", "value": base64.b64encode(value).decode("ascii")}
        raise TypeError(f"Unsupported store value type: {type(value).__name__}")

    @staticmethod
    def _decode(raw: Any) -> Any:
        if isinstance(raw, dict):
            kind = raw.get("__type__")
            if kind == "date":
                return date.fromisoformat(raw["value"])
            if kind == "bytes":
                return base64.b64decode(raw["value"])
            raise StoreCorruptionError(f"Unknown value tag: {kind!r}")
        if isinstance(raw, (bool, int)):
            return raw
        raise StoreCorruptionError(f"Unexpected raw value: {raw!r}")

    # ----- file I/O -----

    def _ensure_directory(self) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"Store directory {self.path.parent} is unavailable: {e}")

    def _read_file(self) -> Dict[str, Any]:
        with open(self.path, 'r', encoding='utf-8') as f:
            try:
                raw = json.load(f)
            except (json.JSONDecodeError, UnicodeDecodeError) as e:
                raise StoreCorruptionError(f"Store file {self.path} is corrupted: {e}")

        if not isinstance(raw, dict):
            raise StoreCorruptionError(f"Store file {self.path} must contain an object")

        data = {}
        for key, value in raw.items():
            if key.startswith("__"):  # Системные ключи
                continue
            try:
                data[key] = self._decode(value)
            except (StoreCorruptionError, KeyError, ValueError) as e:
                logger.warning(f"Skipping undecodable value for {key}: {e}")
        return data

    def _reload_if_changed(self) -> None:
        try:
            if not self.path.exists():
                self._data = {}
                self._mtime = None
                return

            mtime = self.path.stat().st_mtime
            if mtime == self._mtime:
                return

            try:
                self._data = self._read_file()
            except StoreCorruptionError as e:
                logger.error(str(e))
                self._handle_corruption()
            self._mtime = self.path.stat().st_mtime if self.path.exists() else None

        except OSError as e:
            raise StoreUnavailableError(f"Cannot read store {self.path}: {e}")

    def _handle_corruption(self) -> None:
        """Обработка повреждения файла хранилища"""
        logger.warning("Attempting to recover from store corruption...")

        if self.backup_manager:
            for backup_path in self.backup_manager.list_backups():
                if not self.backup_manager.restore_backup(backup_path, self.path):
                    continue
                try:
                    self._data = self._read_file()
                    logger.info(f"Successfully restored from backup: {backup_path.name}")
                    return
                except StoreCorruptionError as e:
                    logger.warning(f"Backup {backup_path.name} is corrupted too: {e}")

        logger.warning("Could not restore from any backup, starting with empty store")
        self._data = {}
        self._save()

    def _save(self) -> None:
        """Атомарное сохранение через временный файл"""
        self._ensure_directory()
        payload = {self.VERSION_KEY: self.CURRENT_VERSION}
        payload.update({key: self._encode(value) for key, value in self._data.items()})

        temp_file = self.path.with_suffix('.tmp')
        try:
            with open(temp_file, 'w', encoding='utf-8') as f:
                json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)

            # Проверяем целостность записанного файла
            with open(temp_file, 'r', encoding='utf-8') as f:
                json.load(f)

            os.replace(temp_file, self.path)
            self._mtime = self.path.stat().st_mtime

        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise StoreUnavailableError(f"Cannot write store {self.path}: {e}")

    # ----- KeyValueStore -----

    def get(self, key: str, default: Any = None) -> Any:
        with self.file_lock:
            self._reload_if_changed()
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._check_value(key, value)
        with self.file_lock:
            self._reload_if_changed()
            self._data[key] = value
            self._save()

    def remove(self, key: str) -> None:
        with self.file_lock:
            self._reload_if_changed()
            if key not in self._data:
                return
            del self._data[key]
            self._save()

    def keys(self) -> List[str]:
        with self.file_lock:
            self._reload_if_changed()
            return list(self._data.keys())

    def remove_prefix(self, prefix: str) -> int:
        with self.file_lock:
            self._reload_if_changed()
            matched = [key for key in self._data if key.startswith(prefix)]
            for key in matched:
                del self._data[key]
            if matched:
                self._save()
            return len(matched)

    def create_backup(self) -> Optional[Path]:
        if not self.backup_manager:
            return None
        with self.file_lock:
            return self.backup_manager.create_backup(self.path)

# ===== DECORATORS =====

class MirroredStore(KeyValueStore):
    """Запись в основное хранилище и в общее (виджет, live activity).

    Одна логическая операция: ошибка записи в зеркало логируется,
    основная запись не откатывается. Чтение идёт из основного хранилища.
    """

    def __init__(self, primary: KeyValueStore, mirror: KeyValueStore):
        self.primary = primary
        self.mirror = mirror

    def get(self, key: str, default: Any = None) -> Any:
        return self.primary.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self.primary.set(key, value)
        try:
            self.mirror.set(key, value)
        except StoreError as e:
            logger.warning(f"Mirror write failed for {key}: {e}")

    def remove(self, key: str) -> None:
        self.primary.remove(key)
        try:
            self.mirror.remove(key)
        except StoreError as e:
            logger.warning(f"Mirror remove failed for {key}: {e}")

    def keys(self) -> List[str]:
        return self.primary.keys()

    def remove_prefix(self, prefix: str) -> int:
        removed = self.primary.remove_prefix(prefix)
        try:
            self.mirror.remove_prefix(prefix)
        except StoreError as e:
            logger.warning(f"Mirror prefix removal failed for {prefix}: {e}")
        return removed

    def create_backup(self) -> Optional[Path]:
        return self.primary.create_backup()

class FailSafeStore(KeyValueStore):
    """Недоступное хранилище: чтение -> значение по умолчанию, запись -> no-op"""

    def __init__(self, inner: KeyValueStore):
        self.inner = inner
        self.is_available = True

    def _degrade(self, operation: str, error: StoreUnavailableError) -> None:
        if self.is_available:
            logger.warning(f"Store unavailable during {operation}, using defaults: {error}")
        else:
            logger.debug(f"Store still unavailable during {operation}: {error}")
        self.is_available = False

    def get(self, key: str, default: Any = None) -> Any:
        try:
            value = self.inner.get(key, default)
        except StoreUnavailableError as e:
            self._degrade("get", e)
            return default
        self.is_available = True
        return value

    def set(self, key: str, value: Any) -> None:
        self._check_value(key, value)
        try:
            self.inner.set(key, value)
        except StoreUnavailableError as e:
            self._degrade("set", e)

    def remove(self, key: str) -> None:
        try:
            self.inner.remove(key)
        except StoreUnavailableError as e:
            self._degrade("remove", e)

    def keys(self) -> List[str]:
        try:
            return self.inner.keys()
        except StoreUnavailableError as e:
            self._degrade("keys", e)
            return []

    def remove_prefix(self, prefix: str) -> int:
        try:
            return self.inner.remove_prefix(prefix)
        except StoreUnavailableError as e:
            self._degrade("remove_prefix", e)
            return 0

    def create_backup(self) -> Optional[Path]:
        try:
            return self.inner.create_backup()
        except StoreUnavailableError as e:
            self._degrade("create_backup", e)
            return None

def open_default_store(app_config=None) -> FailSafeStore:
    """Основное + общее хранилище из конфигурации"""
    if app_config is None:
        from config import config as app_config

    storage = app_config.storage
    backup_manager = BackupManager(storage.backup_dir, storage.max_backups)
    primary = JsonFileStore(storage.path, backup_manager)
    shared = JsonFileStore(storage.shared_path)
    logger.debug(f"Opening store {storage.path} mirrored to {storage.shared_path}")
    return FailSafeStore(MirroredStore(primary, shared))
