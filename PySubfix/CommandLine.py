"""Repair SubRip (.srt) subtitle files from the command line.

Loads each file (auto-detecting its encoding unless one is given), applies the
requested corrections and writes the result as UTF-8.

Corrections are applied in a fixed order, whatever the order of the arguments:
1. --clean-all: remove HTML-like tags and SSA/ASS override blocks
2. --fix-all: sort by start time, remove overlapping display times, renumber
3. --time-adjust: shift every timestamp, clamping at zero and 99:59:59,999

By default the result is written to stdout with the platform's line endings.
--in-place rewrites each input file with Windows (CRLF) line endings, and
--output writes a single result to a different file.

EXAMPLES:
    # Repair a file in place, keeping a backup
    pysubfix movie.srt --fix-all --in-place --backup

    # Strip all markup and delay by 1.5 seconds, writing to a new file
    pysubfix movie.srt -c -s -t 1.5 -o movie.fixed.srt

    # Repair a folder of files using four worker threads
    pysubfix subtitles/*.srt -f -i -j 4

Defaults can also be set with SUBFIX_ENCODING, SUBFIX_LINE_ENDING and
SUBFIX_CHARSET_CONFIDENCE environment variables; LOG_LEVEL sets the console log level.
"""
from __future__ import annotations

import os
import logging
import shutil
import sys
import threading

from argparse import ArgumentParser, ArgumentTypeError, Namespace
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import BinaryIO

from PySubfix import adjust_time, clean_all, fix_all, init_options, load_file, save, save_file
from PySubfix.Formats.SrtFileHandler import LINE_ENDING_NAMES, SrtFileHandler
from PySubfix.Helpers import GetBackupPath, GetInputPath
from PySubfix.Helpers.Localization import _, initialize_localization
from PySubfix.Helpers.Time import GetTimeDelta
from PySubfix.Options import Options
from PySubfix.SettingsType import SettingsError
from PySubfix.SubtitleDocument import SubtitleDocument
from PySubfix.SubtitleError import SubtitleError
@dataclass
class LoggerOptions():
    file_handler: logging.FileHandler|None
    log_path: str|None

def InitLogger(log_path : str|None = None, debug : bool = False, verbosity : int = 0) -> LoggerOptions:
    """ Initialise console logging on stderr, and optionally a log file """
    file_handler = None

    if debug or verbosity > 1:
        logging_level = logging.DEBUG
    elif verbosity == 1:
        logging_level = logging.INFO
    else:
        level_name = os.getenv('LOG_LEVEL', 'WARNING').upper()
        logging_level = getattr(logging, level_name, logging.WARNING)

    logging.basicConfig(format='%(levelname)s: %(message)s', level=logging_level, force=True)

    if debug:
        logging.debug("Debug logging enabled")

    if log_path:
        try:
            file_handler = logging.FileHandler(log_path, encoding='utf-8', mode='w')
            file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
            file_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
            logging.getLogger('').addHandler(file_handler)
        except OSError as e:
            logging.warning(f"Unable to create log file at {log_path}: {e}")

    return LoggerOptions(file_handler=file_handler, log_path=log_path)

def ParseTimeAdjust(value : str):
    """ Argument type for --time-adjust: signed decimal seconds or a timestamp """
    try:
        offset = GetTimeDelta(value)
    except ValueError:
        offset = None

    if offset is None:
        raise ArgumentTypeError(f"invalid time adjustment: {value!r}")
    return offset

def CreateArgParser(description : str) -> ArgumentParser:
    """
    Create the argument parser for the subtitle repair tool
    """
    parser = ArgumentParser(description=description)
    parser.add_argument('input', nargs='+', help="Path to one or more SubRip (.srt) files")
    parser.add_argument('-c', '--clean-all', dest='clean_all', action='store_true', default=None, help="Remove HTML-like and SSA/ASS markup from the subtitle text")
    parser.add_argument('-s', '--strip-formatting', dest='strip_formatting', action='store_true', default=None, help="When cleaning, remove bold and italic markup as well")
    parser.add_argument('-f', '--fix-all', dest='fix_all', action='store_true', default=None, help="Sort by start time, remove overlapping times and renumber the subtitles")
    parser.add_argument('-t', '--time-adjust', dest='time_adjust', type=ParseTimeAdjust, default=None, metavar='SECONDS', help="Shift all times by a number of seconds, e.g. 2.5 or -1.25")
    parser.add_argument('-e', '--encoding', type=str, default=None, help="Encoding of the input files (detected automatically by default)")
    parser.add_argument('-i', '--in-place', dest='in_place', action='store_true', default=None, help="Overwrite the input files instead of writing to stdout")
    parser.add_argument('-o', '--output', type=str, default=None, help="Write the result to this file (single input only)")
    parser.add_argument('-b', '--backup', dest='write_backup', action='store_true', default=None, help="Copy each file to FILE.bak before overwriting it")
    parser.add_argument('--line-ending', dest='line_ending', choices=sorted(LINE_ENDING_NAMES.keys()), default=None, help="Line ending to write (crlf for files, native for stdout by default)")
    parser.add_argument('-j', '--jobs', type=int, default=1, help="Number of files to process concurrently")
    parser.add_argument('-v', '--verbose', action='count', default=0, help="Increase logging verbosity (repeatable)")
    parser.add_argument('--debug', action='store_true', help="Run with DEBUG log level")
    parser.add_argument('--logfile', type=str, default=None, help="Also write the log to this file")
    return parser

def CreateOptions(args : Namespace, **kwargs) -> Options:
    """ Create options from the command line arguments, leaving unspecified settings at their defaults """
    settings = {
        'clean_all': args.clean_all,
        'strip_formatting': args.strip_formatting,
        'fix_all': args.fix_all,
        'time_adjust': args.time_adjust,
        'encoding': args.encoding,
        'in_place': args.in_place,
        'write_backup': args.write_backup,
        'line_ending': args.line_ending,
    }

    settings.update(kwargs)

    options = init_options(**settings)

    # Console output uses the platform's newline unless a line ending was requested
    if not options.get_str('line_ending') and not options.in_place and not args.output:
        options['line_ending'] = 'native'

    return options

class ProcessingStatistics:
    """Summary of a processing run, updated from worker threads."""

    def __init__(self, discovered_files : int = 0):
        self.discovered_files = discovered_files
        self.processed_files = 0
        self.skipped_files = 0
        self.failed_files = 0
        self.lock = threading.Lock()

    def RecordProcessed(self) -> None:
        with self.lock:
            self.processed_files += 1

    def RecordSkipped(self) -> None:
        with self.lock:
            self.skipped_files += 1

    def RecordFailed(self) -> None:
        with self.lock:
            self.failed_files += 1

    def as_message(self) -> str:
        """Return a human readable summary string."""
        return (
            f"Processed {self.discovered_files} file(s): "
            f"{self.processed_files} written, "
            f"{self.skipped_files} skipped, "
            f"{self.failed_files} failed"
        )

class FileProcessor:
    """
    Load, correct and write subtitle files according to the options.

    Results are written back to the input file (in place), to an explicit output path,
    or to a binary stream. Stream writes are serialised so concurrent documents do not interleave.
    """
    def __init__(self, options : Options, stream : BinaryIO|None = None, output_path : str|None = None):
        self.options = options
        self.stream = stream
        self.output_path = output_path
        self.stream_lock = threading.Lock()
        self.statistics = ProcessingStatistics()

    def ProcessFiles(self, filepaths : list[str], jobs : int = 1) -> ProcessingStatistics:
        """ Process each file, using a thread pool if more than one job is requested """
        self.statistics = ProcessingStatistics(discovered_files=len(filepaths))

        if jobs > 1 and len(filepaths) > 1:
            with ThreadPoolExecutor(max_workers=jobs) as executor:
                list(executor.map(self.ProcessFile, filepaths))
        else:
            for filepath in filepaths:
                self.ProcessFile(filepath)

        return self.statistics

    def ProcessFile(self, filepath : str) -> bool:
        """
        Process a single file, logging and counting any failure rather than raising it
        """
        path = GetInputPath(filepath) or filepath
        try:
            document = self.LoadAndCorrect(path)

            if not document.linecount:
                logging.warning(_("No subtitles found in {}, skipping").format(path))
                self.statistics.RecordSkipped()
                return False

            self.WriteDocument(document, path)

        except (SubtitleError, OSError) as e:
            logging.error(_("Failed to process {}: {}").format(path, e))
            self.statistics.RecordFailed()
            return False

        self.statistics.RecordProcessed()
        return True

    def LoadAndCorrect(self, path : str) -> SubtitleDocument:
        """ Load a file and apply the requested passes: clean, then fix, then time adjustment """
        extension = os.path.splitext(path)[1].lower()
        if extension not in SrtFileHandler.SUPPORTED_EXTENSIONS:
            logging.warning(_("{} does not have a .srt extension, attempting to parse it anyway").format(path))

        document = load_file(path, options=self.options)
        logging.info(f"Loaded {document.linecount} subtitles from {path} ({document.encoding})")

        if self.options.clean_all:
            clean_all(document, self.options.strip_formatting)

        if self.options.fix_all:
            fix_all(document)

        time_adjust = self.options.time_adjust
        if time_adjust:
            adjust_time(document, time_adjust)

        return document

    def WriteDocument(self, document : SubtitleDocument, path : str) -> None:
        line_ending = self.options.line_ending

        if self.options.in_place:
            if self.options.write_backup:
                backup_path = GetBackupPath(path, self.options.backup_extension)
                shutil.copyfile(path, backup_path)
                logging.info(f"Saved backup copy to {backup_path}")

            save_file(document, path, line_ending)
            logging.info(f"Wrote {document.linecount} subtitles to {path}")

        elif self.output_path:
            save_file(document, self.output_path, line_ending)
            logging.info(f"Wrote {document.linecount} subtitles to {self.output_path}")

        elif self.stream is not None:
            content = save(document, line_ending)
            with self.stream_lock:
                self.stream.write(content)
                self.stream.flush()

        else:
            raise SubtitleError(_("No output destination for {}").format(path))

def main(argv : list[str]|None = None, stdout : BinaryIO|None = None) -> int:
    """Entry point for command line execution."""
    initialize_localization()

    parser = CreateArgParser("Repairs, cleans and re-times SubRip subtitle files")
    args = parser.parse_args(argv)

    if args.output and len(args.input) > 1:
        parser.error("--output can only be used with a single input file")

    if args.output and args.in_place:
        parser.error("--output and --in-place cannot be combined")

    if args.jobs < 1:
        parser.error("--jobs must be at least 1")

    logger_options = InitLogger(args.logfile, args.debug, args.verbose)

    try:
        options = CreateOptions(args)
        options.LogSettings()

        # Validate settings before any file is touched
        line_ending = options.line_ending
        logging.debug(f"Line ending: {line_ending!r}, minimum charset confidence: {options.charset_confidence}")

    except (SettingsError, SubtitleError) as e:
        logging.error(str(e))
        return 1

    if options.write_backup and not options.in_place:
        logging.warning("--backup has no effect without --in-place")

    stream = None
    if not options.in_place and not args.output:
        stream = stdout or sys.stdout.buffer

    processor = FileProcessor(options, stream=stream, output_path=args.output)

    try:
        stats = processor.ProcessFiles(args.input, jobs=args.jobs)

    except KeyboardInterrupt:
        logging.warning("Processing interrupted by user")
        return 130

    finally:
        if logger_options.file_handler:
            logging.getLogger('').removeHandler(logger_options.file_handler)
            logger_options.file_handler.close()

    logging.info(stats.as_message())

    return 0 if stats.failed_files == 0 else 1
