# === FILE: site_mapper/config.py ===
"""
Модуль для загрузки и валидации конфигурации краулера SiteMapper.
Используется Pydantic для описания схемы и проверки данных.
"""
from __future__ import annotations

import errno
import json
import os
from pathlib import Path
from typing import Any, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

DEFAULT_USER_AGENT = "SitemapGenerator/1.0"


class CrawlerConfig(BaseModel):
    """Настройки краулера, общие для всех запусков."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    user_agent: str = Field(DEFAULT_USER_AGENT, min_length=1, description="Заголовок User-Agent.")
    timeout: float = Field(10.0, gt=0, description="Таймаут на один запрос (секунд).")
    batch_size: int = Field(5, ge=1, le=50, description="Число параллельных запросов в пакете.")
    request_delay: float = Field(0.2, ge=0, description="Фиксированная пауза между пакетами (секунд).")
    max_depth: int = Field(2, ge=1, le=10, description="Глубина обхода по умолчанию.")
    max_pages: int = Field(50, ge=1, le=200, description="Лимит страниц по умолчанию.")
    log_level: str = Field("INFO", description="Уровень логирования.")

    @field_validator("log_level", mode="before")
    def _upper_level(cls, v: Any) -> Any:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def _check_log_level(self) -> CrawlerConfig:
        if self.log_level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log_level: {self.log_level}")
        return self


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def load_config(path: Union[str, Path, None]) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Без пути использует configs/default.yaml, если он есть, иначе значения по умолчанию.
    Явно указанный, но отсутствующий файл: FileNotFoundError.
    """
    if path is None:
        if not _DEFAULT_CFG.is_file():
            return CrawlerConfig()
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        data = _read_yaml(path_obj)
    elif suffix == ".json":
        data = _read_json(path_obj)
    else:
        raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")

    try:
        return CrawlerConfig(**data)
    except ValidationError:
        raise


__all__ = ["CrawlerConfig", "DEFAULT_USER_AGENT", "load_config"]
