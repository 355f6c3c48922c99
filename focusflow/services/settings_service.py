# -*- coding: utf-8 -*-

import logging
from dataclasses import replace
from typing import Any, Callable, Dict, Optional

from focusflow.constants import (
    MAX_DURATION_MINUTES,
    MIN_DURATION_MINUTES,
    SETTINGS_KEY,
    SOUNDS_BY_ID,
)
from focusflow.domain.models import THEMES, AppSettings, InvalidSettingsError
from focusflow.storage.kv import KeyValueStore, PersistentValue

logger = logging.getLogger(__name__)

_DURATION_FIELDS = ("pomodoro_length", "short_break_length", "long_break_length")
_COUNT_FIELDS = ("cycles_before_long_break", "weekly_goal")
_FLAG_FIELDS = ("notifications", "sound_enabled")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_settings(settings: AppSettings) -> AppSettings:
    for name in _DURATION_FIELDS:
        value = getattr(settings, name)
        if not _is_int(value) or not MIN_DURATION_MINUTES <= value <= MAX_DURATION_MINUTES:
            raise InvalidSettingsError(
                name,
                f"must be a whole number of minutes between "
                f"{MIN_DURATION_MINUTES} and {MAX_DURATION_MINUTES}, got {value!r}",
            )
    for name in _COUNT_FIELDS:
        value = getattr(settings, name)
        if not _is_int(value) or value <= 0:
            raise InvalidSettingsError(name, f"must be a positive integer, got {value!r}")
    for name in _FLAG_FIELDS:
        if not isinstance(getattr(settings, name), bool):
            raise InvalidSettingsError(name, "must be true or false")
    if settings.theme not in THEMES:
        raise InvalidSettingsError("theme", f"must be one of {', '.join(THEMES)}")
    if settings.background_sound is not None and settings.background_sound not in SOUNDS_BY_ID:
        raise InvalidSettingsError("background_sound", f"unknown sound {settings.background_sound!r}")
    return settings


def _decode_settings(raw: Any) -> AppSettings:
    if not isinstance(raw, dict):
        raise ValueError("settings must be an object")
    # stored blob is merged over defaults
    return validate_settings(AppSettings.from_dict(raw))


class SettingsService:
    def __init__(self, store: KeyValueStore):
        self._value: PersistentValue[AppSettings] = PersistentValue(
            store,
            SETTINGS_KEY,
            default=AppSettings(),
            decode=_decode_settings,
            encode=lambda s: s.to_dict(),
        )
        self._on_change: Optional[Callable[[AppSettings], None]] = None
        self._value.set_on_change(self._external_change)

    @property
    def settings(self) -> AppSettings:
        return self._value.value

    def set_on_change(self, fn: Optional[Callable[[AppSettings], None]]) -> None:
        self._on_change = fn

    def update(self, **changes: Any) -> AppSettings:
        """
        Validate and persist a partial update.
        Raises InvalidSettingsError and keeps the previous settings when any value is bad.
        """
        unknown = set(changes) - set(AppSettings.__dataclass_fields__)
        if unknown:
            raise InvalidSettingsError(sorted(unknown)[0], "unknown setting")
        updated = validate_settings(replace(self.settings, **changes))
        self._value.set(updated)
        logger.info("Settings updated: %s", ", ".join(sorted(changes)))
        return updated

    def changed_fields(self, old: AppSettings, new: AppSettings) -> Dict[str, Any]:
        return {
            name: getattr(new, name)
            for name in AppSettings.__dataclass_fields__
            if getattr(old, name) != getattr(new, name)
        }

    def close(self) -> None:
        self._value.close()

    def _external_change(self, settings: AppSettings) -> None:
        logger.info("Settings changed elsewhere")
        if self._on_change:
            self._on_change(settings)
