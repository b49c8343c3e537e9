from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import timedelta

from PySubfix.Formats.SrtFileHandler import ResolveLineEnding
from PySubfix.Helpers.Charset import default_min_confidence
from PySubfix.SettingsType import SettingsError, SettingType, SettingsType

default_settings = SettingsType({
    'encoding': os.getenv('SUBFIX_ENCODING') or None,
    'line_ending': os.getenv('SUBFIX_LINE_ENDING') or None,
    'charset_confidence': os.getenv('SUBFIX_CHARSET_CONFIDENCE', default_min_confidence),
    'clean_all': False,
    'strip_formatting': False,
    'fix_all': False,
    'time_adjust': timedelta(0),
    'in_place': False,
    'write_backup': False,
    'backup_extension': '.bak',
})

class Options(SettingsType):
    """
    Settings for loading, correcting and saving subtitles.

    Defaults can be overridden with environment variables:
        SUBFIX_ENCODING             explicit input encoding (default: auto-detect)
        SUBFIX_LINE_ENDING          crlf, lf, cr or native (default: crlf)
        SUBFIX_CHARSET_CONFIDENCE   minimum detector confidence (default: 0, accept any detected charset)
    """
    def __init__(self, settings : Mapping[str, SettingType]|None = None, **kwargs : SettingType):
        super().__init__(default_settings)

        if settings:
            self.update(settings)

        if kwargs:
            self.update(kwargs)

    @property
    def encoding(self) -> str|None:
        return self.get_str('encoding') or None

    @property
    def line_ending(self) -> str:
        """ The line ending sequence to write, validated """
        return ResolveLineEnding(self.get_str('line_ending'))

    @property
    def charset_confidence(self) -> float:
        confidence = self.get_float('charset_confidence', default_min_confidence)
        if confidence is None or not 0.0 <= confidence <= 1.0:
            raise SettingsError(f"charset_confidence must be between 0 and 1, got {confidence}")
        return confidence

    @property
    def clean_all(self) -> bool:
        return self.get_bool('clean_all')

    @property
    def strip_formatting(self) -> bool:
        return self.get_bool('strip_formatting')

    @property
    def fix_all(self) -> bool:
        return self.get_bool('fix_all')

    @property
    def time_adjust(self) -> timedelta:
        return self.get_timedelta('time_adjust', timedelta(0))

    @property
    def in_place(self) -> bool:
        return self.get_bool('in_place')

    @property
    def write_backup(self) -> bool:
        return self.get_bool('write_backup')

    @property
    def backup_extension(self) -> str:
        return self.get_str('backup_extension') or '.bak'

    def LogSettings(self) -> None:
        """ Log the effective settings at debug level """
        for key, value in sorted(self.items()):
            logging.debug(f"{key}: {value!r}")
