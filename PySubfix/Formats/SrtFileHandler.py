import logging
import os
from collections.abc import Iterable, Iterator
from typing import BinaryIO

import regex

from PySubfix.Helpers.Charset import DecodeBytes, DetectEncoding
from PySubfix.Helpers.Localization import _
from PySubfix.Helpers.Time import FormatSrtTiming, ParseSrtTimestamp
from PySubfix.SubtitleDocument import SubtitleDocument
from PySubfix.SubtitleEntry import SubtitleEntry
from PySubfix.SubtitleError import UnsupportedLineEndingError

# Line ending sequences that may be used in output
SUPPORTED_LINE_ENDINGS = ('\r\n', '\n', '\r')

LINE_ENDING_NAMES = {
    'crlf': '\r\n',
    'lf': '\n',
    'cr': '\r',
    'native': os.linesep,
}

default_line_ending = '\r\n'
output_encoding = 'utf-8'

_TIMING_SEPARATOR = '-->'

# Optionally signed ASCII digits, nothing else
_INDEX_PATTERN = regex.compile(r'[+-]?[0-9]+')

def ResolveLineEnding(line_ending : str|None) -> str:
    """
    Accept either a line ending sequence or its name (crlf, lf, cr, native)
    """
    if line_ending is None:
        return default_line_ending

    if line_ending in SUPPORTED_LINE_ENDINGS:
        return line_ending

    resolved = LINE_ENDING_NAMES.get(line_ending.strip().lower())
    if resolved is None:
        raise UnsupportedLineEndingError(line_ending)

    return resolved

class SrtFileHandler:
    """
    Reads and writes SubRip (.srt) subtitles.

    Parsing is tolerant: a block that does not have a valid timing line is skipped,
    and an index that cannot be parsed is recorded as 0. Output is always UTF-8
    without a byte order mark, whatever the input encoding was.
    """

    SUPPORTED_EXTENSIONS = ['.srt']

    def __init__(self, min_confidence : float|None = None):
        self.min_confidence : float|None = min_confidence

    def load_file(self, path : str, encoding : str|None = None) -> SubtitleDocument:
        """
        Read and parse a subtitle file.

        Raises:
            OSError: If the file cannot be read
            SubtitleError: If an unknown encoding is specified
        """
        with open(path, 'rb') as f:
            return self.parse_file(f, encoding)

    def parse_file(self, file_obj : BinaryIO, encoding : str|None = None) -> SubtitleDocument:
        """
        Read the remaining content of a binary stream and parse it
        """
        return self.parse_bytes(file_obj.read(), encoding)

    def parse_bytes(self, data : bytes, encoding : str|None = None) -> SubtitleDocument:
        """
        Decode subtitle bytes, auto-detecting the encoding unless one is given, and parse them.
        """
        data = bytes(data)
        resolved_encoding = DetectEncoding(data, encoding, self.min_confidence)
        text = DecodeBytes(data, resolved_encoding)
        entries = list(self._parse_entries(text))
        return SubtitleDocument(entries, encoding=resolved_encoding)

    def parse_string(self, content : str) -> SubtitleDocument:
        """
        Parse subtitle text that has already been decoded
        """
        return SubtitleDocument(self._parse_entries(content))

    def compose(self, entries : Iterable[SubtitleEntry], line_ending : str = default_line_ending) -> bytes:
        """
        Serialize entries in SubRip layout.

        Args:
            entries: a SubtitleDocument or any sequence of entries, written in order
            line_ending: CRLF, LF or CR

        Returns:
            bytes: UTF-8 encoded subtitle content

        Raises:
            UnsupportedLineEndingError: if line_ending is not CRLF, LF or CR
        """
        if line_ending not in SUPPORTED_LINE_ENDINGS:
            raise UnsupportedLineEndingError(line_ending)

        blocks : list[str] = []
        for entry in entries:
            blocks.append(line_ending.join([
                str(entry.index),
                FormatSrtTiming(entry.start, entry.end),
                line_ending.join(entry.lines),
                '',
                ''
            ]))

        return ''.join(blocks).encode(output_encoding)

    def save_file(self, entries : Iterable[SubtitleEntry], path : str, line_ending : str = default_line_ending) -> None:
        """
        Write entries to a file, replacing any existing content.

        The content is composed before the file is opened, so an invalid line ending leaves the file untouched.
        """
        content = self.compose(entries, line_ending)
        with open(path, 'wb') as f:
            f.write(content)

    def _parse_entries(self, text : str) -> Iterator[SubtitleEntry]:
        """
        Split text into blank-line separated blocks and yield an entry for each valid block.

        CR, and LF not preceded by CR, end a line. Blocks of fewer than two lines are ignored.
        """
        line_chars : list[str] = []
        lines : list[str] = []
        last_char = ''
        skipped = 0

        for char in text:
            if char == '\r' or (char == '\n' and last_char != '\r'):
                if line_chars:
                    lines.append(''.join(line_chars))
                    line_chars.clear()
                else:
                    if len(lines) >= 2:
                        entry = self._parse_block(lines)
                        if entry is not None:
                            yield entry
                        else:
                            skipped += 1
                    lines.clear()

            elif char != '\n':
                line_chars.append(char)

            last_char = char

        if line_chars:
            lines.append(''.join(line_chars))

        if len(lines) >= 2:
            entry = self._parse_block(lines)
            if entry is not None:
                yield entry
            else:
                skipped += 1

        if skipped:
            logging.debug(_("Skipped {} malformed subtitle blocks").format(skipped))

    def _parse_block(self, lines : list[str]) -> SubtitleEntry|None:
        """
        Parse index, timing and text lines of a single block, or return None if the timing is invalid
        """
        index_text = lines[0].strip()
        index = int(index_text) if _INDEX_PATTERN.fullmatch(index_text) else 0

        timing = [ part.strip() for part in lines[1].split(_TIMING_SEPARATOR) ]
        if len(timing) != 2:
            return None

        start = ParseSrtTimestamp(timing[0])
        end = ParseSrtTimestamp(timing[1])
        if start is None or end is None:
            return None

        return SubtitleEntry(index=index, start=start, end=end, lines=tuple(lines[2:]))
