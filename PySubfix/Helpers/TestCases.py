from datetime import timedelta
import unittest
from typing import Any

from PySubfix.Helpers.Tests import log_input_expected_result, log_test_name
from PySubfix.SubtitleDocument import SubtitleDocument
from PySubfix.SubtitleEntry import SubtitleEntry

class LoggedTestCase(unittest.TestCase):
    """
    TestCase whose assertions log the input, expected and actual values before asserting
    """
    @classmethod
    def setUpClass(cls) -> None:
        super().setUpClass()
        log_test_name(f"{cls.__name__}")

    def setUp(self) -> None:
        super().setUp()
        log_test_name(self._testMethodName)

    def assertLoggedEqual(self, description : str, expected : Any, actual : Any, input_value : Any = None) -> None:
        log_input_expected_result(description if input_value is None else input_value, expected, actual)
        self.assertEqual(expected, actual, description)

    def assertLoggedNotEqual(self, description : str, unexpected : Any, actual : Any) -> None:
        log_input_expected_result(description, f"not {unexpected}", actual)
        self.assertNotEqual(unexpected, actual, description)

    def assertLoggedTrue(self, description : str, actual : Any, input_value : Any = None) -> None:
        log_input_expected_result(description if input_value is None else input_value, True, actual)
        self.assertTrue(actual, description)

    def assertLoggedFalse(self, description : str, actual : Any, input_value : Any = None) -> None:
        log_input_expected_result(description if input_value is None else input_value, False, actual)
        self.assertFalse(actual, description)

    def assertLoggedIs(self, description : str, expected : Any, actual : Any) -> None:
        log_input_expected_result(description, expected, actual)
        self.assertIs(actual, expected, description)

    def assertLoggedIsNone(self, description : str, actual : Any) -> None:
        log_input_expected_result(description, None, actual)
        self.assertIsNone(actual, description)

    def assertLoggedIsNotNone(self, description : str, actual : Any) -> None:
        log_input_expected_result(description, "not None", actual)
        self.assertIsNotNone(actual, description)

    def assertLoggedIsInstance(self, description : str, actual : Any, expected_type : type) -> None:
        log_input_expected_result(description, expected_type.__name__, type(actual).__name__)
        self.assertIsInstance(actual, expected_type, description)

    def assertLoggedIn(self, description : str, member : Any, container : Any) -> None:
        log_input_expected_result(description, f"contains {member!r}", container)
        self.assertIn(member, container, description)

    def assertLoggedNotIn(self, description : str, member : Any, container : Any) -> None:
        log_input_expected_result(description, f"does not contain {member!r}", container)
        self.assertNotIn(member, container, description)

    def assertLoggedSequenceEqual(self, description : str, expected : Any, actual : Any, input_value : Any = None) -> None:
        log_input_expected_result(description if input_value is None else input_value, expected, actual)
        self.assertSequenceEqual(list(expected), list(actual), description)

    def assertLoggedGreater(self, description : str, actual : Any, threshold : Any) -> None:
        log_input_expected_result(description, f"> {threshold}", actual)
        self.assertGreater(actual, threshold, description)

    def assertLoggedGreaterEqual(self, description : str, actual : Any, threshold : Any) -> None:
        log_input_expected_result(description, f">= {threshold}", actual)
        self.assertGreaterEqual(actual, threshold, description)

    def assertLoggedLessEqual(self, description : str, actual : Any, threshold : Any) -> None:
        log_input_expected_result(description, f"<= {threshold}", actual)
        self.assertLessEqual(actual, threshold, description)


class SubtitleTestCase(LoggedTestCase):
    """
    Adds helpers for building documents and comparing them with expected timings
    """
    def _assert_timings(self, document : SubtitleDocument, expected : list[tuple[int, str, str]]) -> None:
        """
        Assert that the document has exactly the expected (index, start, end) sequence
        """
        actual = [ (entry.index, FormatMs(entry.start), FormatMs(entry.end)) for entry in document ]
        self.assertLoggedSequenceEqual("entry timings", expected, actual)

    def _assert_time_ordered(self, document : SubtitleDocument) -> None:
        for previous, current in zip(document.entries, document.entries[1:]):
            self.assertLessEqual(previous.start, current.start, f"{previous} starts after {current}")

    def _assert_no_overlaps(self, document : SubtitleDocument) -> None:
        for previous, current in zip(document.entries, document.entries[1:]):
            self.assertLessEqual(previous.end, current.start, f"{previous} overlaps {current}")


def BuildDocument(timings : list[tuple[int, float, float]], text : str = "Line {}") -> SubtitleDocument:
    """
    Build a document from (index, start seconds, end seconds) tuples
    """
    entries = [ SubtitleEntry.Construct(index, start, end, text.format(index)) for index, start, end in timings ]
    return SubtitleDocument(entries)

def FormatMs(value : timedelta) -> str:
    """ Compact h:mm:ss.mmm representation for test comparisons """
    milliseconds = (value.days * 86400 + value.seconds) * 1000 + value.microseconds // 1000
    seconds, ms = divmod(milliseconds, 1000)
    minutes, seconds = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}:{minutes:02}:{seconds:02}.{ms:03}"
