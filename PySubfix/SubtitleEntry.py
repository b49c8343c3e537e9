from __future__ import annotations

import dataclasses
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal

from PySubfix.Helpers.Time import FormatSrtTiming, GetTimeDelta

@dataclass(frozen=True)
class SubtitleEntry:
    """
    One SubRip cue: a display window and its text lines.

    Entries are immutable - corrections derive a modified copy with Copy().

    Attributes:
        index (int): Cue number as declared in the file (0 if it could not be parsed)
        start (timedelta): Time the cue is first displayed
        end (timedelta): Time the cue is removed
        lines (tuple[str, ...]): Text lines, in display order
    """
    index : int
    start : timedelta
    end : timedelta
    lines : tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.lines, tuple):
            object.__setattr__(self, 'lines', tuple(self.lines))

    @classmethod
    def Construct(cls, index : int, start : timedelta|float|Decimal|str, end : timedelta|float|Decimal|str, lines : Iterable[str]|str|None = None) -> SubtitleEntry:
        """
        Create an entry from loosely typed values, e.g. Construct(1, "00:00:01,000", 2.5, "Hello\\nWorld")
        """
        start_time = GetTimeDelta(start)
        end_time = GetTimeDelta(end)
        if start_time is None or end_time is None:
            raise ValueError(f"Entry {index} requires a start and end time")

        if lines is None:
            text_lines : tuple[str, ...] = ()
        elif isinstance(lines, str):
            text_lines = tuple(lines.splitlines())
        else:
            text_lines = tuple(lines)

        return cls(index=index, start=start_time, end=end_time, lines=text_lines)

    def Copy(self, **changes) -> SubtitleEntry:
        """
        Return a copy of the entry with the given fields replaced
        """
        return dataclasses.replace(self, **changes)

    @property
    def text(self) -> str:
        return '\n'.join(self.lines)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_inverted(self) -> bool:
        """ True if the cue ends before it starts """
        return self.end < self.start

    @property
    def timing(self) -> str:
        return FormatSrtTiming(self.start, self.end)

    def __str__(self) -> str:
        return f"{self.index}: {self.timing} {self.text!r}"
