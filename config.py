#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Daya Tracker v1.0 - Configuration
Централизованная конфигурация с валидацией

Версия: 1.0.0
Дата: 2026-10-19
"""

import os
import sys
from pathlib import Path
from typing import Dict, Any
from dataclasses import dataclass
from enum import Enum

import pytz
from tzlocal import get_localzone_name

class Environment(Enum):
    """Среды выполнения"""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

class LogLevel(Enum):
    """Уровни логирования"""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

def system_timezone_name() -> str:
    """IANA-имя часового пояса системы, UTC если его не удалось определить"""
    try:
        name = get_localzone_name()
    except (KeyError, ValueError, OSError):
        return 'UTC'
    return name if name in pytz.all_timezones_set else 'UTC'

@dataclass
class StorageConfig:
    """Конфигурация хранилища"""
    path: Path
    shared_path: Path
    backup_dir: Path
    max_backups: int = 10
    auto_backup: bool = True

@dataclass
class ReadingConfig:
    """Конфигурация Сехадж Паатх"""
    total_angs: int = 1430
    angs_prefix: str = "paath_angs_"
    completed_prefix: str = "paath_completed_"
    start_date_key: str = "paath_start_date"
    target_date_key: str = "paath_target_date"

@dataclass
class WidgetConfig:
    """Конфигурация виджета и live activity"""
    refresh_minutes: int = 15
    refresh_at_midnight: bool = True

class AppConfig:
    """Главный класс конфигурации"""

    def __init__(self):
        self.environment = Environment(os.getenv('ENVIRONMENT', 'development'))
        self._load_config()
        self._validate_config()

    def _load_config(self):
        """Загрузка конфигурации из переменных окружения"""

        # Директории
        self.data_dir = Path(os.getenv('DATA_DIR', 'data'))
        self.shared_data_dir = Path(os.getenv('SHARED_DATA_DIR', str(self.data_dir / 'shared')))
        self.export_dir = Path(os.getenv('EXPORT_DIR', 'exports'))
        self.backup_dir = Path(os.getenv('BACKUP_DIR', 'backups'))
        self.log_dir = Path(os.getenv('LOG_DIR', 'logs'))

        # Хранилище
        self.storage = StorageConfig(
            path=self.data_dir / "defaults.json",
            shared_path=self.shared_data_dir / "group.defaults.json",
            backup_dir=self.backup_dir,
            max_backups=int(os.getenv('MAX_BACKUPS', 10)),
            auto_backup=os.getenv('AUTO_BACKUP', 'true').lower() == 'true'
        )

        # Сехадж Паатх
        self.reading = ReadingConfig(
            total_angs=int(os.getenv('PAATH_TOTAL_ANGS', 1430))
        )

        # Виджет
        self.widget = WidgetConfig(
            refresh_minutes=int(os.getenv('WIDGET_REFRESH_MINUTES', 15)),
            refresh_at_midnight=os.getenv('WIDGET_REFRESH_AT_MIDNIGHT', 'true').lower() == 'true'
        )

        # Часовой пояс, в котором считаются календарные дни
        self.timezone_name = os.getenv('TIMEZONE') or system_timezone_name()

        # Логирование
        self.log_level = LogLevel(os.getenv('LOG_LEVEL', 'INFO'))
        self.log_to_file = os.getenv('LOG_TO_FILE', 'false').lower() == 'true'
        self.log_format = os.getenv(
            'LOG_FORMAT',
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
        )

    def _validate_config(self):
        """Валидация конфигурации"""
        errors = []

        if self.reading.total_angs <= 0:
            errors.append("PAATH_TOTAL_ANGS должен быть положительным числом")

        if self.widget.refresh_minutes <= 0:
            errors.append("WIDGET_REFRESH_MINUTES должен быть положительным числом")

        if self.storage.max_backups < 0:
            errors.append("MAX_BACKUPS не может быть отрицательным")

        if self.timezone_name not in pytz.all_timezones_set:
            errors.append(f"Неизвестный часовой пояс: {self.timezone_name}")

        if errors:
            raise ValueError("Ошибки конфигурации:\n" + "\n".join(f"• {error}" for error in errors))

    @property
    def timezone(self):
        """Часовой пояс pytz"""
        return pytz.timezone(self.timezone_name)

    def ensure_directories(self):
        """Создание необходимых директорий"""
        directories = [
            self.data_dir,
            self.shared_data_dir,
            self.export_dir,
            self.backup_dir,
        ]
        if self.log_to_file:
            directories.append(self.log_dir)

        for directory in directories:
            directory.mkdir(parents=True, exist_ok=True)

    def get_logging_config(self) -> Dict[str, Any]:
        """Получение конфигурации логирования"""
        handlers = ['console']
        if self.log_to_file:
            handlers.append('file')

        logging_config = {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'default': {
                    'format': self.log_format,
                    'datefmt': '%Y-%m-%d %H:%M:%S'
                }
            },
            'handlers': {
                'console': {
                    'class': 'logging.StreamHandler',
                    'level': self.log_level.value,
                    'formatter': 'default',
                    'stream': sys.stderr
                }
            },
            'loggers': {
                '': {
                    'level': self.log_level.value,
                    'handlers': handlers,
                    'propagate': False
                },
                'apscheduler': {
                    'level': 'WARNING',
                    'handlers': handlers,
                    'propagate': False
                }
            }
        }

        if self.log_to_file:
            logging_config['handlers']['file'] = {
                'class': 'logging.handlers.RotatingFileHandler',
                'level': self.log_level.value,
                'formatter': 'default',
                'filename': str(self.log_dir / f"daya_{self.environment.value}.log"),
                'maxBytes': 10485760,  # 10MB
                'backupCount': 5,
                'encoding': 'utf-8'
            }

        return logging_config

    def is_development(self) -> bool:
        """Проверка режима разработки"""
        return self.environment == Environment.DEVELOPMENT

    def to_dict(self) -> Dict[str, Any]:
        """Сериализация конфигурации в словарь"""
        return {
            'environment': self.environment.value,
            'storage': {
                'path': str(self.storage.path),
                'shared_path': str(self.storage.shared_path),
                'backup_dir': str(self.storage.backup_dir),
                'max_backups': self.storage.max_backups
            },
            'reading': {
                'total_angs': self.reading.total_angs
            },
            'widget': {
                'refresh_minutes': self.widget.refresh_minutes
            },
            'timezone': self.timezone_name,
            'log_level': self.log_level.value
        }

# Глобальный экземпляр конфигурации
config = AppConfig()

# Экспорт для использования в других модулях
__all__ = [
    'config',
    'AppConfig',
    'Environment',
    'LogLevel',
    'system_timezone_name',
    'StorageConfig',
    'ReadingConfig',
    'WidgetConfig'
]
