import codecs
import logging

import chardet

from PySubfix.Helpers.Localization import _
from PySubfix.SubtitleError import SubtitleError

# Encodings used when detection is inconclusive
utf8_encoding = 'utf-8'
legacy_encoding = 'cp1252'

# Any charset the detector names is used unless a higher minimum confidence is requested
default_min_confidence = 0.0

_BYTE_ORDER_MARK = '\ufeff'

def DetectEncoding(data : bytes, explicit_encoding : str|None = None, min_confidence : float|None = None) -> str:
    """
    Decide which text encoding to use for a buffer of subtitle bytes.

    An explicit encoding always wins. Otherwise the encoding named by the statistical detector is used,
    provided Python has a codec for it and its confidence is at least min_confidence (0 by default).
    If nothing usable is detected, valid UTF-8 is assumed, and finally the Windows-1252 codepage.
    """
    if explicit_encoding:
        return explicit_encoding

    if min_confidence is None:
        min_confidence = default_min_confidence

    detection = chardet.detect(data)
    detected = detection.get('encoding')
    confidence = detection.get('confidence') or 0.0

    if detected and confidence >= min_confidence and _is_known_codec(detected):
        logging.debug(f"Detected {detected} (confidence: {confidence:.2f})")
        return detected

    if detected:
        logging.debug(f"Ignoring detected {detected} (confidence: {confidence:.2f})")

    if IsValidUtf8(data):
        logging.debug("Detected UTF-8 (valid byte sequence)")
        return utf8_encoding

    logging.debug(f"Falling back to {legacy_encoding}")
    return legacy_encoding

def IsValidUtf8(data : bytes) -> bool:
    """
    Check whether the whole buffer is a well-formed UTF-8 byte sequence
    """
    try:
        data.decode(utf8_encoding, errors='strict')
        return True
    except UnicodeDecodeError:
        return False

def DecodeBytes(data : bytes, encoding : str) -> str:
    """
    Decode bytes with the given encoding, replacing undecodable sequences rather than failing.
    A leading byte order mark is dropped. Raises SubtitleError if the encoding is unknown.
    """
    try:
        text = data.decode(encoding, errors='replace')
    except LookupError as e:
        raise SubtitleError(_("Unknown encoding: {}").format(encoding), e)

    if text.startswith(_BYTE_ORDER_MARK):
        text = text[1:]
    return text

def _is_known_codec(name : str) -> bool:
    try:
        codecs.lookup(name)
        return True
    except LookupError:
        logging.debug(f"No codec available for detected encoding {name}")
        return False
