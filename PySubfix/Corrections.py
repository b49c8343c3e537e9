"""
Correction passes over an ordered sequence of subtitle entries.

Every pass returns a new list and never modifies the entries it is given;
changed entries are replaced with modified copies. The passes are independent,
but FixTimeOverlaps assumes the sequence is already in time order, so the
canonical composition is FixTimeOrder -> FixTimeOverlaps -> FixIndices.
"""
from collections.abc import Callable, Sequence
from datetime import timedelta

from PySubfix.Helpers.Markup import StripAllTags, StripAssTags, StripHtmlTags
from PySubfix.Helpers.Time import max_srt_time
from PySubfix.SubtitleEntry import SubtitleEntry

def FixTimeOrder(entries : Sequence[SubtitleEntry]) -> list[SubtitleEntry]:
    """
    Stable sort by start time, then by declared index
    """
    return sorted(entries, key=lambda entry: (entry.start, entry.index))

def FixTimeOverlaps(entries : Sequence[SubtitleEntry]) -> list[SubtitleEntry]:
    """
    Clamp each entry's end time to the start of the entry that follows it.

    Only the immediate successor is considered. An entry that ends before it starts
    is not corrected.
    """
    result : list[SubtitleEntry] = []
    for i, entry in enumerate(entries):
        next_start = entries[i + 1].start if i + 1 < len(entries) else timedelta.max
        if entry.end > next_start:
            result.append(entry.Copy(end=next_start))
        else:
            result.append(entry)
    return result

def FixIndices(entries : Sequence[SubtitleEntry]) -> list[SubtitleEntry]:
    """
    Renumber entries sequentially from 1 in their current order
    """
    return [ entry if entry.index == number else entry.Copy(index=number) for number, entry in enumerate(entries, start=1) ]

def FixAll(entries : Sequence[SubtitleEntry]) -> list[SubtitleEntry]:
    return FixIndices(FixTimeOverlaps(FixTimeOrder(entries)))

def AdjustTime(entries : Sequence[SubtitleEntry], offset : timedelta) -> list[SubtitleEntry]:
    """
    Shift every entry by offset. Times that would be negative are set to zero,
    and times beyond 99:59:59,999 are capped so the result can still be written and read back.
    """
    def shift(time : timedelta) -> timedelta:
        return min(max_srt_time, max(timedelta(0), time + offset))

    return [ entry.Copy(start=shift(entry.start), end=shift(entry.end)) for entry in entries ]

def CleanHtmlTags(entries : Sequence[SubtitleEntry], strip_formatting : bool = False) -> list[SubtitleEntry]:
    return _clean_lines(entries, lambda line: StripHtmlTags(line, strip_formatting))

def CleanAssTags(entries : Sequence[SubtitleEntry], strip_formatting : bool = False) -> list[SubtitleEntry]:
    return _clean_lines(entries, lambda line: StripAssTags(line, strip_formatting))

def CleanAll(entries : Sequence[SubtitleEntry], strip_formatting : bool = False) -> list[SubtitleEntry]:
    return _clean_lines(entries, lambda line: StripAllTags(line, strip_formatting))

def _clean_lines(entries : Sequence[SubtitleEntry], clean : Callable[[str], str]) -> list[SubtitleEntry]:
    result : list[SubtitleEntry] = []
    for entry in entries:
        lines : list[str] = []
        for line in entry.lines:
            cleaned = clean(line)
            # Drop lines that only contained markup
            if cleaned or not line:
                lines.append(cleaned)

        if tuple(lines) != entry.lines:
            entry = entry.Copy(lines=lines)
        result.append(entry)
    return result
