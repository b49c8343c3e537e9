from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import timedelta

from PySubfix import Corrections
from PySubfix.SubtitleEntry import SubtitleEntry

class SubtitleDocument:
    """
    An ordered sequence of subtitle entries, as loaded from a SubRip file.

    Correction methods replace the whole sequence with the result of the corresponding
    pass in Corrections; entries themselves are never modified.
    """
    def __init__(self, entries : Iterable[SubtitleEntry]|None = None, encoding : str|None = None) -> None:
        self._entries : list[SubtitleEntry] = list(entries or [])
        self.encoding : str|None = encoding

    @property
    def entries(self) -> tuple[SubtitleEntry, ...]:
        return tuple(self._entries)

    @property
    def linecount(self) -> int:
        return len(self._entries)

    @property
    def is_time_ordered(self) -> bool:
        return all(a.start <= b.start for a, b in zip(self._entries, self._entries[1:]))

    @property
    def has_overlaps(self) -> bool:
        return any(a.end > b.start for a, b in zip(self._entries, self._entries[1:]))

    def FixAll(self) -> None:
        """
        Sort by time, resolve overlaps and renumber
        """
        self.FixTimeOrder()
        self.FixTimeOverlaps()
        self.FixIndices()

    def FixTimeOrder(self) -> None:
        self._entries = Corrections.FixTimeOrder(self._entries)

    def FixTimeOverlaps(self) -> None:
        self._entries = Corrections.FixTimeOverlaps(self._entries)

    def FixIndices(self) -> None:
        self._entries = Corrections.FixIndices(self._entries)

    def AdjustTime(self, offset : timedelta) -> None:
        """
        Shift all entries by offset, clamping negative times to zero
        """
        self._entries = Corrections.AdjustTime(self._entries, offset)

    def CleanAll(self, strip_formatting : bool = False) -> None:
        """
        Remove SSA/ASS override blocks and HTML-like tags from every text line
        """
        self._entries = Corrections.CleanAll(self._entries, strip_formatting)

    def CleanHtmlTags(self, strip_formatting : bool = False) -> None:
        self._entries = Corrections.CleanHtmlTags(self._entries, strip_formatting)

    def CleanAssTags(self, strip_formatting : bool = False) -> None:
        self._entries = Corrections.CleanAssTags(self._entries, strip_formatting)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SubtitleEntry]:
        return iter(self._entries)

    def __getitem__(self, position : int) -> SubtitleEntry:
        return self._entries[position]

    def __eq__(self, other : object) -> bool:
        if not isinstance(other, SubtitleDocument):
            return NotImplemented
        return self._entries == other._entries

    def __repr__(self) -> str:
        return f"SubtitleDocument({len(self._entries)} entries, encoding={self.encoding!r})"
