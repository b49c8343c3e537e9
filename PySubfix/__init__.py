"""
PySubfix - SubRip Subtitle Repair Library

A Python library for loading SubRip (.srt) subtitles in any common encoding,
repairing ordering, overlap and numbering defects, stripping inline markup,
shifting timestamps and writing the result back out as UTF-8.

Basic Usage
-----------

# Load subtitles, auto-detecting the encoding
with open("movie.srt", "rb") as f:
    doc = load(f)

# Remove markup, repair structure and delay everything by 1.5 seconds
clean_all(doc)
fix_all(doc)
adjust_time(doc, 1.5)

# Serialize as UTF-8 with Windows line endings
content = save(doc)
"""
from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import BinaryIO

from PySubfix.Formats.SrtFileHandler import SrtFileHandler, default_line_ending
from PySubfix.Helpers import GetInputPath
from PySubfix.Helpers.Time import GetTimeDelta
from PySubfix.Options import Options
from PySubfix.SettingsType import SettingType, SettingsType
from PySubfix.SubtitleDocument import SubtitleDocument
from PySubfix.SubtitleEntry import SubtitleEntry
from PySubfix.SubtitleError import SubtitleError, UnsupportedLineEndingError
from PySubfix.version import __version__


def init_options(**settings: SettingType) -> Options:
    """
    Create and return an :class:`Options` instance for loading, correcting and saving subtitles.

    Parameters
    ----------
    **settings : SettingType
        Keyword settings, e.g.

        encoding = "cp1251",
        line_ending = "lf",
        clean_all = True,
        fix_all = True,
        time_adjust = -2.5

        Settings that are None or not specified are assigned default values.

    Returns
    -------
    Options
        An Options instance with the specified configuration.

    Examples
    --------

    opts = init_options(fix_all=True, line_ending="lf")
    """
    return Options(SettingsType(settings))

def load(source : bytes|bytearray|BinaryIO, encoding : str|None = None, *, options : Options|None = None) -> SubtitleDocument:
    """
    Load subtitles from raw bytes or a readable binary stream.

    Parameters
    ----------
    source : bytes or binary stream
        The subtitle content. A stream is read from its current position to the end.
    encoding : str or None, optional
        The text encoding to use. When omitted the encoding is detected from the content.
    options : Options, optional
        Supplies a default encoding and the detector confidence threshold.

    Returns
    -------
    SubtitleDocument
        The parsed subtitles. Malformed blocks are skipped, so the document may be empty.

    Exceptions
    ----------
    OSError
        If the stream cannot be read.
    SubtitleError
        If the requested encoding is unknown.
    """
    handler = _create_handler(options)
    encoding = encoding or (options.encoding if options else None)

    if isinstance(source, (bytes, bytearray, memoryview)):
        return handler.parse_bytes(bytes(source), encoding)

    return handler.parse_file(source, encoding)

def load_auto(source : bytes|bytearray|BinaryIO) -> SubtitleDocument:
    """
    Load subtitles, always detecting the encoding from the content
    """
    return load(source, None)

def load_file(filepath : str, encoding : str|None = None, *, options : Options|None = None) -> SubtitleDocument:
    """
    Load subtitles from a file.

    Examples
    --------

    doc = load_file("movie.srt")
    doc = load_file("movie.srt", encoding="cp1251")
    """
    path = GetInputPath(filepath)
    if not path:
        raise SubtitleError("No subtitle file specified")

    handler = _create_handler(options)
    encoding = encoding or (options.encoding if options else None)
    return handler.load_file(path, encoding)

def fix_all(doc : SubtitleDocument) -> SubtitleDocument:
    """
    Sort entries by start time, remove overlapping display times and renumber from 1.
    The document is modified in place and returned for convenience.
    """
    doc.FixAll()
    return doc

def clean_all(doc : SubtitleDocument, strip_formatting : bool = False) -> SubtitleDocument:
    """
    Remove SSA/ASS override blocks and HTML-like tags from all text lines.

    Parameters
    ----------
    doc : SubtitleDocument
        The document to clean, modified in place.
    strip_formatting : bool, optional
        If True, bold and italic markup is removed as well. By default it is kept
        (SSA/ASS toggles are converted to <b> and <i> tags).
    """
    doc.CleanAll(strip_formatting)
    return doc

def adjust_time(doc : SubtitleDocument, offset : timedelta|int|float|Decimal|str) -> SubtitleDocument:
    """
    Shift every entry by offset, which may be a timedelta, a (signed) number of seconds
    or a timestamp string such as "-00:00:02,500". Times that would become negative are set to zero.

    Examples
    --------

    adjust_time(doc, 2.5)           # delay by 2.5 seconds
    adjust_time(doc, "-0:01:00")    # bring forward by a minute
    """
    delta = GetTimeDelta(offset)
    if delta is None:
        raise SubtitleError(f"Invalid time offset: {offset!r}")

    doc.AdjustTime(delta)
    return doc

def save(doc : SubtitleDocument, line_ending : str = default_line_ending) -> bytes:
    """
    Serialize subtitles as UTF-8 encoded SubRip.

    Parameters
    ----------
    doc : SubtitleDocument
        The subtitles to serialize, written in document order.
    line_ending : str, optional
        "\\r\\n" (default), "\\n" or "\\r".

    Exceptions
    ----------
    UnsupportedLineEndingError
        If any other line ending is requested. Nothing is produced in that case.
    """
    return SrtFileHandler().compose(doc, line_ending)

def save_file(doc : SubtitleDocument, filepath : str, line_ending : str = default_line_ending) -> None:
    """
    Write subtitles to a file as UTF-8 encoded SubRip, replacing any existing content
    """
    path = GetInputPath(filepath)
    if not path:
        raise SubtitleError("No output file specified")

    SrtFileHandler().save_file(doc, path, line_ending)

def _create_handler(options : Options|None) -> SrtFileHandler:
    min_confidence = options.charset_confidence if options else None
    return SrtFileHandler(min_confidence=min_confidence)

__all__ = [
    '__version__',
    'Options',
    'SettingsType',
    'SubtitleDocument',
    'SubtitleEntry',
    'SubtitleError',
    'UnsupportedLineEndingError',
    'init_options',
    'load',
    'load_auto',
    'load_file',
    'fix_all',
    'clean_all',
    'adjust_time',
    'save',
    'save_file',
]
