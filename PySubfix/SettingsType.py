from __future__ import annotations
from collections.abc import Mapping
from datetime import timedelta
from typing import TypeAlias

from PySubfix.Helpers.Time import GetTimeDelta

SettingType: TypeAlias = str | int | float | bool | timedelta | None

_TRUE_VALUES = ('true', 'yes', '1', 'on')
_FALSE_VALUES = ('false', 'no', '0', 'off', '')

class SettingsError(Exception):
    """Raised when a setting cannot be coerced to the expected type."""
    pass

class SettingsType(dict[str, SettingType]):
    """
    Flat settings dictionary with type-safe getters.

    Values usually arrive as strings (environment variables) or as parsed command line
    arguments, so each getter accepts either form.
    """
    def __init__(self, settings : Mapping[str,SettingType]|None = None):
        super().__init__(settings or {})

    def get_bool(self, key: str, default: bool|None = False) -> bool:
        """Get a boolean setting, accepting true/false, yes/no, on/off and 1/0"""
        value = self.get(key, default)
        if value is None:
            return False

        if isinstance(value, bool):
            return value
        elif isinstance(value, int):
            return value != 0
        elif isinstance(value, str):
            lower_val = value.strip().lower()
            if lower_val in _TRUE_VALUES:
                return True
            elif lower_val in _FALSE_VALUES:
                return False

        raise SettingsError(f"Cannot convert setting '{key}' with value {value!r} to bool")

    def get_float(self, key: str, default: float|None = None) -> float|None:
        """Get a numeric setting as a float"""
        value = self.get(key, default)
        if value is None:
            return None

        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        elif isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                pass

        raise SettingsError(f"Cannot convert setting '{key}' with value {value!r} to a number")

    def get_str(self, key: str, default: str|None = None) -> str|None:
        value = self.get(key, default)
        return None if value is None else str(value)

    def get_timedelta(self, key: str, default: timedelta) -> timedelta:
        """Get a time offset from a timedelta, a number of seconds or a timestamp string"""
        value = self.get(key, default)
        if value is None:
            return default
        if isinstance(value, timedelta):
            return value
        elif isinstance(value, (int, float, str)) and not isinstance(value, bool):
            try:
                result = GetTimeDelta(value)
            except ValueError as e:
                raise SettingsError(f"Cannot convert setting '{key}' with value {value!r} to a time offset: {e}")
            return result if result is not None else default

        raise SettingsError(f"Cannot convert setting '{key}' of type {type(value).__name__} to a time offset")

    def update(self, other=(), /, **kwds) -> None:
        """Update settings, ignoring None values so unspecified settings keep their current value"""
        if hasattr(other, 'items'):
            other = {k: v for k, v in other.items() if v is not None}
        kwds = {k: v for k, v in kwds.items() if v is not None}
        super().update(other, **kwds)
