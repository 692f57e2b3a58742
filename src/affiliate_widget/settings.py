"""
Key-value settings stores and typed readers for pipeline settings.

The pipeline only needs ``get(key)``. ``JsonSettingsStore`` additionally
persists settings, validating them on the way in.
"""
from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Protocol, Union

from pydantic import ValidationError

from .logger import get_logger
from .models import FallbackList, PipelineConfig
from .schemas.settings import AffiliateSettingsSchema

logger = get_logger(__name__)

SETTINGS_KEYS = tuple(AffiliateSettingsSchema.model_fields.keys())

# A blank value here means "not configured" and disables keyword extraction
BLANK_MEANS_UNSET = ("model", "prompt")


class SettingsStore(Protocol):
    """Read-only key-value configuration surface."""

    def get(self, key: str) -> Any:
        ...


class DictSettingsStore:
    """In-memory settings store."""

    def __init__(self, values: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(values or {})

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value


class JsonSettingsStore:
    """
    Settings persisted as a JSON object on disk.

    Values are cached on load; ``reload()`` picks up external edits.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._values: Dict[str, Any] = {}
        self.reload()

    def reload(self) -> None:
        if not self.path.exists():
            logger.info(f"Settings file {self.path} not found, using defaults")
            self._values = {}
            return

        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Could not read settings file {self.path}, using defaults: {e}")
            self._values = {}
            return

        if not isinstance(data, dict):
            logger.warning(f"Settings file {self.path} must contain a JSON object, using defaults")
            self._values = {}
            return
        self._values = data

    def get(self, key: str) -> Any:
        return self._values.get(key)

    def save(self, settings: Union[AffiliateSettingsSchema, Dict[str, Any]]) -> AffiliateSettingsSchema:
        """
        Validate and persist settings.

        Args:
            settings: Schema instance or raw mapping of settings

        Returns:
            The validated settings that were written

        Raises:
            pydantic.ValidationError: If any value is out of range
        """
        if not isinstance(settings, AffiliateSettingsSchema):
            settings = AffiliateSettingsSchema.model_validate(settings)

        data = settings.model_dump(mode="json")
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp_path.open("w", encoding="utf-8") as fh:
            json.dump(data, fh, indent=2)
        os.replace(tmp_path, self.path)

        self._values = data
        logger.info(f"Saved settings to {self.path}")
        return settings


def _read_setting(store: SettingsStore, key: str, log: logging.Logger) -> Any:
    """Read one key, falling back to its default when missing or invalid."""
    default = AffiliateSettingsSchema.model_fields[key].get_default(call_default_factory=True)
    value = store.get(key)
    if value is None:
        return default
    if key in BLANK_MEANS_UNSET and isinstance(value, str) and not value.strip():
        return ""

    try:
        validated = AffiliateSettingsSchema.model_validate({key: value})
    except ValidationError as e:
        log.warning(f"Invalid setting {key}={value!r}, using default {default!r}: {e.errors()[0]['msg']}")
        return default
    return getattr(validated, key)


def load_settings(store: SettingsStore, log: Optional[logging.Logger] = None) -> AffiliateSettingsSchema:
    """Take a validated snapshot of every setting in the store."""
    log = log or logger
    values = {key: _read_setting(store, key, log) for key in SETTINGS_KEYS}
    # Each value is validated on its own; model_construct keeps a blank model or prompt
    return AffiliateSettingsSchema.model_construct(**values)


def to_pipeline_config(settings: AffiliateSettingsSchema) -> PipelineConfig:
    return PipelineConfig(
        model=settings.model,
        prompt=settings.prompt,
        max_tokens=settings.max_tokens,
        temperature=settings.temperature,
        frequency_penalty=settings.frequency_penalty,
        presence_penalty=settings.presence_penalty,
        keyword_normalization=settings.keyword_normalization,
    )


def load_pipeline_config(store: SettingsStore, log: Optional[logging.Logger] = None) -> PipelineConfig:
    """Read the language model settings from the store."""
    return to_pipeline_config(load_settings(store, log))


def load_fallback_list(store: SettingsStore, log: Optional[logging.Logger] = None) -> FallbackList:
    """Read the configured fallback product ids (at most five)."""
    return FallbackList.from_ids(_read_setting(store, "fallback_products", log or logger))
