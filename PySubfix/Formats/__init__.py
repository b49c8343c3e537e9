"""
PySubfix.Formats - Subtitle file handlers

SubRip is the only supported format; the handler encapsulates decoding,
block parsing and serialization so the correction logic stays format-agnostic.
"""

from . import SrtFileHandler
