import os
import tempfile
import unittest
from datetime import timedelta

from PySubfix.Formats.SrtFileHandler import SrtFileHandler, ResolveLineEnding
from PySubfix.Helpers.TestCases import SubtitleTestCase
from PySubfix.Helpers.Tests import log_input_expected_error, log_test_name, skip_if_debugger_attached
from PySubfix.SubtitleEntry import SubtitleEntry
from PySubfix.SubtitleError import SubtitleError, UnsupportedLineEndingError


class TestSrtFileHandlerParse(SubtitleTestCase):
    """Parsing of SubRip text into entries."""

    def setUp(self):
        super().setUp()
        self.handler = SrtFileHandler()

        self.sample_srt_content = (
            "1\n"
            "00:00:01,000 --> 00:00:03,000\n"
            "First subtitle line\n"
            "\n"
            "2\n"
            "00:00:04,000 --> 00:00:06,500\n"
            "Second subtitle line\n"
            "with line break\n"
            "\n"
        )

        self.expected_entries = [
            SubtitleEntry.Construct(1, timedelta(seconds=1), timedelta(seconds=3), "First subtitle line"),
            SubtitleEntry.Construct(2, timedelta(seconds=4), timedelta(seconds=6, milliseconds=500), ["Second subtitle line", "with line break"]),
        ]

    def test_ParseString(self):
        document = self.handler.parse_string(self.sample_srt_content)
        self.assertLoggedSequenceEqual("parsed entries", self.expected_entries, document.entries)

    def test_LineEndingVariants(self):
        for name, line_ending in [ ("LF", "\n"), ("CRLF", "\r\n"), ("CR", "\r") ]:
            with self.subTest(line_ending=name):
                content = self.sample_srt_content.replace("\n", line_ending)
                document = self.handler.parse_string(content)
                self.assertLoggedSequenceEqual(f"entries parsed with {name}", self.expected_entries, document.entries)

    def test_MixedLineEndings(self):
        content = "1\r\n00:00:01,000 --> 00:00:03,000\rFirst subtitle line\n\r\n2\n00:00:04,000 --> 00:00:06,500\r\nSecond subtitle line\rwith line break\n\n"
        document = self.handler.parse_string(content)
        self.assertLoggedSequenceEqual("entries parsed with mixed line endings", self.expected_entries, document.entries)

    def test_EmptyInput(self):
        for content in [ "", "\n", "\r\n\r\n", "1\n" ]:
            with self.subTest(content=content):
                document = self.handler.parse_string(content)
                self.assertLoggedEqual(f"entries parsed from {content!r}", 0, document.linecount)

    def test_MalformedBlockSkipped(self):
        content = (
            "1\n00:00:01,000 --> 00:00:02,000\nGood\n\n"
            "2\n00:00:03,000 -> 00:00:04,000\nBad arrow\n\n"
            "3\n00:00:05,000 --> 00:00:06,000 --> 00:00:07,000\nToo many arrows\n\n"
            "4\n0:00:08,000 --> 00:00:09,000\nShort hours\n\n"
            "5\nNot a timing line\n\n"
            "6\n00:00:10,000 --> 00:00:11,000\nAlso good\n\n"
        )
        document = self.handler.parse_string(content)
        self.assertLoggedSequenceEqual("parsed indices", [1, 6], [ entry.index for entry in document ])

    def test_UnparseableIndex(self):
        content = "first\n00:00:01,000 --> 00:00:02,000\nText\n\n 2 \n00:00:03,000 --> 00:00:04,000\nText\n\n"
        document = self.handler.parse_string(content)
        self.assertLoggedSequenceEqual("parsed indices", [0, 2], [ entry.index for entry in document ])

    def test_IndexFormats(self):
        cases = [ ("12", 12), ("+3", 3), ("-4", -4), ("007", 7), ("1_000", 0), ("\u0663", 0), ("1.5", 0), ("1 2", 0), (" ", 0) ]
        for index_text, expected in cases:
            with self.subTest(index=index_text):
                content = f"{index_text}\n00:00:01,000 --> 00:00:02,000\nText\n\n"
                document = self.handler.parse_string(content)
                self.assertLoggedEqual(f"index parsed from {index_text!r}", expected, document[0].index, input_value=index_text)

    def test_EntryWithoutText(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\n\n2\n00:00:03,000 --> 00:00:04,000\nText\n\n"
        document = self.handler.parse_string(content)

        self.assertLoggedEqual("entry count", 2, document.linecount)
        self.assertLoggedEqual("first entry lines", (), document[0].lines)

    def test_BlankLinesSplitEntries(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\nBefore gap\n\nAfter gap\n\n2\n00:00:03,000 --> 00:00:04,000\nNext\n\n"
        document = self.handler.parse_string(content)

        self.assertLoggedEqual("entry count", 2, document.linecount)
        self.assertLoggedSequenceEqual("first entry lines", ["Before gap"], document[0].lines)

    def test_InvertedEntryPreserved(self):
        content = "1\n00:00:05,000 --> 00:00:02,000\nBackwards\n\n"
        document = self.handler.parse_string(content)

        self.assertLoggedEqual("entry count", 1, document.linecount)
        self.assertLoggedTrue("is inverted", document[0].is_inverted)

    def test_UnterminatedFinalLine(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\nNo trailing newline"
        document = self.handler.parse_string(content)
        self.assertLoggedSequenceEqual("lines", ["No trailing newline"], document[0].lines)

    def test_WhitespaceLinesAreText(self):
        content = "1\n00:00:01,000 --> 00:00:02,000\n  \nText\n\n"
        document = self.handler.parse_string(content)
        self.assertLoggedSequenceEqual("lines", ["  ", "Text"], document[0].lines)


class TestSrtFileHandlerBytes(SubtitleTestCase):
    """Decoding of subtitle bytes."""

    content = "1\r\n00:00:01,000 --> 00:00:02,000\r\nCafé crème, s'il vous plaît\r\n\r\n"

    def setUp(self):
        super().setUp()
        self.handler = SrtFileHandler()

    def test_ParseBytesExplicitEncoding(self):
        document = self.handler.parse_bytes(self.content.encode('cp1252'), 'cp1252')

        self.assertLoggedEqual("text", "Café crème, s'il vous plaît", document[0].text)
        self.assertLoggedEqual("encoding", 'cp1252', document.encoding)

    def test_ParseBytesWithByteOrderMark(self):
        document = self.handler.parse_bytes(self.content.encode('utf-8-sig'))

        self.assertLoggedEqual("index", 1, document[0].index)
        self.assertLoggedEqual("text", "Café crème, s'il vous plaît", document[0].text)

    def test_ParseBytesUtf16(self):
        document = self.handler.parse_bytes(self.content.encode('utf-16'))

        self.assertLoggedEqual("entry count", 1, document.linecount)
        self.assertLoggedEqual("text", "Café crème, s'il vous plaît", document[0].text)

    def test_ParseBytesUnknownEncoding(self):
        if skip_if_debugger_attached("test_ParseBytesUnknownEncoding"):
            return

        with self.assertRaises(SubtitleError) as cm:
            self.handler.parse_bytes(b"1\n00:00:01,000 --> 00:00:02,000\nText\n", 'x-imaginary-codec')
        log_input_expected_error("unknown encoding", SubtitleError, cm.exception)


class TestSrtFileHandlerCompose(SubtitleTestCase):
    """Serialization of entries."""

    def setUp(self):
        super().setUp()
        self.handler = SrtFileHandler()
        self.entries = [
            SubtitleEntry.Construct(1, 1, 2.5, "Hello"),
            SubtitleEntry.Construct(2, 3, 4, ["Two", "Lines"]),
        ]

    def test_ComposeCrLf(self):
        result = self.handler.compose(self.entries)
        expected = b"1\r\n00:00:01,000 --> 00:00:02,500\r\nHello\r\n\r\n2\r\n00:00:03,000 --> 00:00:04,000\r\nTwo\r\nLines\r\n\r\n"
        self.assertLoggedEqual("composed content", expected, result)

    def test_ComposeLineEndings(self):
        for line_ending in [ "\n", "\r" ]:
            with self.subTest(line_ending=repr(line_ending)):
                result = self.handler.compose(self.entries, line_ending)
                expected = f"1{line_ending}00:00:01,000 --> 00:00:02,500{line_ending}Hello{line_ending}{line_ending}".encode('utf-8')
                self.assertLoggedTrue(f"content starts with first block ({line_ending!r})", result.startswith(expected))
                self.assertLoggedNotIn("no CRLF sequences", b"\r\n", result)

    def test_ComposeEmpty(self):
        self.assertLoggedEqual("composed empty document", b"", self.handler.compose([]))

    def test_ComposeUtf8WithoutBom(self):
        entries = [ SubtitleEntry.Construct(1, 0, 1, "Grüße, 你好") ]
        result = self.handler.compose(entries, "\n")

        self.assertLoggedFalse("starts with BOM", result.startswith(b'\xef\xbb\xbf'))
        self.assertLoggedIn("encoded text", "Grüße, 你好".encode('utf-8'), result)

    def test_ComposeUnsupportedLineEnding(self):
        if skip_if_debugger_attached("test_ComposeUnsupportedLineEnding"):
            return

        for line_ending in [ "", "\n\r", "\t", "crlf" ]:
            with self.subTest(line_ending=repr(line_ending)):
                with self.assertRaises(UnsupportedLineEndingError) as cm:
                    self.handler.compose(self.entries, line_ending)
                log_input_expected_error(repr(line_ending), UnsupportedLineEndingError, cm.exception)
                self.assertLoggedIsInstance("also a ValueError", cm.exception, ValueError)

    def test_RoundTrip(self):
        for line_ending in [ "\r\n", "\n", "\r" ]:
            with self.subTest(line_ending=repr(line_ending)):
                composed = self.handler.compose(self.entries, line_ending)
                document = self.handler.parse_bytes(composed, 'utf-8')
                self.assertLoggedSequenceEqual("round trip entries", self.entries, document.entries)

    def test_RoundTripEntryWithoutText(self):
        entries = [ SubtitleEntry.Construct(1, 0, 1), SubtitleEntry.Construct(2, 1, 2, "After") ]
        document = self.handler.parse_string(self.handler.compose(entries, "\n").decode('utf-8'))
        self.assertLoggedSequenceEqual("round trip entries", entries, document.entries)


class TestSrtFileHandlerFiles(SubtitleTestCase):
    """Reading and writing files."""

    def setUp(self):
        super().setUp()
        self.handler = SrtFileHandler()
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "test.srt")

    def tearDown(self):
        self.temp_dir.cleanup()
        super().tearDown()

    def test_SaveAndLoad(self):
        entries = [ SubtitleEntry.Construct(1, 1, 2, "Saved") ]
        self.handler.save_file(entries, self.path)

        with open(self.path, 'rb') as f:
            content = f.read()

        self.assertLoggedEqual("file content", b"1\r\n00:00:01,000 --> 00:00:02,000\r\nSaved\r\n\r\n", content)

        document = self.handler.load_file(self.path)
        self.assertLoggedSequenceEqual("loaded entries", entries, document.entries)

    def test_SaveInvalidLineEndingLeavesFile(self):
        if skip_if_debugger_attached("test_SaveInvalidLineEndingLeavesFile"):
            return

        with open(self.path, 'wb') as f:
            f.write(b"original")

        with self.assertRaises(UnsupportedLineEndingError):
            self.handler.save_file([ SubtitleEntry.Construct(1, 1, 2, "Text") ], self.path, "\t")

        with open(self.path, 'rb') as f:
            self.assertLoggedEqual("file content", b"original", f.read())

    def test_LoadMissingFile(self):
        if skip_if_debugger_attached("test_LoadMissingFile"):
            return

        with self.assertRaises(OSError) as cm:
            self.handler.load_file(os.path.join(self.temp_dir.name, "missing.srt"))
        log_input_expected_error("missing file", OSError, cm.exception)


class TestResolveLineEnding(SubtitleTestCase):
    cases = [
        (None, "\r\n"),
        ("crlf", "\r\n"),
        ("LF", "\n"),
        (" cr ", "\r"),
        ("native", os.linesep),
        ("\r\n", "\r\n"),
        ("\n", "\n"),
        ("\r", "\r"),
    ]

    def test_ResolveLineEnding(self):
        log_test_name("ResolveLineEnding")
        for value, expected in self.cases:
            with self.subTest(value=value):
                self.assertLoggedEqual(f"resolved {value!r}", expected, ResolveLineEnding(value), input_value=repr(value))

    def test_ResolveUnknownLineEnding(self):
        if skip_if_debugger_attached("test_ResolveUnknownLineEnding"):
            return

        for value in [ "", "unix", "\n\r" ]:
            with self.subTest(value=value):
                with self.assertRaises(UnsupportedLineEndingError) as cm:
                    ResolveLineEnding(value)
                log_input_expected_error(repr(value), UnsupportedLineEndingError, cm.exception)

if __name__ == '__main__':
    unittest.main()
