from datetime import timedelta
from decimal import Decimal, InvalidOperation

import regex
import srt # type: ignore

# Exact fixed-width SubRip timestamp, e.g. 01:02:03,456
_SRT_TIMESTAMP_PATTERN = regex.compile(r'^([0-9]{2}):([0-5][0-9]):([0-5][0-9]),([0-9]{3})$')

# Largest time a two-digit hour field can hold
max_srt_time = timedelta(hours=99, minutes=59, seconds=59, milliseconds=999)

# Looser form accepted for user input, e.g. "-0:00:01.5" or "1:02:03,4"
_OFFSET_TIMESTAMP_PATTERN = regex.compile(r'^([+-])?(?:(\d+):)?(\d+):(\d+)(?:[,.](\d{1,3}))?$')

def ParseSrtTimestamp(value : str) -> timedelta|None:
    """
    Parse a timestamp in the exact HH:MM:SS,mmm form used by SubRip timing lines.

    Returns None if the value does not match the pattern or is out of range.
    """
    match = _SRT_TIMESTAMP_PATTERN.match(value)
    if not match:
        return None

    hours, minutes, seconds, milliseconds = (int(group) for group in match.groups())
    return timedelta(hours=hours, minutes=minutes, seconds=seconds, milliseconds=milliseconds)

def FormatSrtTimestamp(value : timedelta) -> str:
    """
    Format a non-negative timedelta as HH:MM:SS,mmm
    """
    return srt.timedelta_to_srt_timestamp(value)

def FormatSrtTiming(start : timedelta, end : timedelta) -> str:
    return f"{FormatSrtTimestamp(start)} --> {FormatSrtTimestamp(end)}"

def GetTimeDelta(value : timedelta|int|float|Decimal|str|None) -> timedelta|None:
    """
    Convert a number of seconds or a (possibly signed) timestamp string to a timedelta.

    Fractional seconds are truncated to whole milliseconds, towards zero.
    """
    if value is None:
        return None

    if isinstance(value, timedelta):
        return value

    if isinstance(value, bool):
        raise ValueError(f"Invalid time value: {value!r}")

    if isinstance(value, (int, float, Decimal)):
        return _seconds_to_timedelta(Decimal(str(value)))

    text = str(value).strip()
    if not text:
        return None

    try:
        return _seconds_to_timedelta(Decimal(text))
    except InvalidOperation:
        pass

    match = _OFFSET_TIMESTAMP_PATTERN.match(text.replace(' ', ''))
    if not match:
        raise ValueError(f"Invalid time value: {value!r}")

    sign, hours, minutes, seconds, fraction = match.groups()
    milliseconds = int((fraction or '0').ljust(3, '0'))
    delta = timedelta(hours=int(hours or 0), minutes=int(minutes), seconds=int(seconds), milliseconds=milliseconds)
    return -delta if sign == '-' else delta

def _seconds_to_timedelta(seconds : Decimal) -> timedelta:
    if not seconds.is_finite():
        raise ValueError(f"Invalid time value: {seconds}")
    milliseconds = int(seconds * 1000)
    return timedelta(milliseconds=milliseconds)
