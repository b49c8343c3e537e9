"""
Inline markup grammars found in SubRip text lines.

Two tag families are recognised: HTML-like tags (<i>, <font color="...">) and
SubStation Alpha override blocks ({\\an8}, {\\i1}). Only complete tags are removed;
an unterminated tag is left in the text as it is.
"""
from __future__ import annotations

import pysubs2
import regex

# Open or close tag of a supported HTML-like element, with any attributes
_HTML_TAG_PATTERN = regex.compile(r'<\s*(/?)\s*(b|i|u|s|font)\b[^<>]*>', regex.IGNORECASE)

_FORMATTING_HTML_TAGS = {'b', 'i'}

# Same block grammar pysubs2 uses to strip overrides from SSA event text
_ASS_BLOCK_PATTERN = pysubs2.SSAEvent.OVERRIDE_SEQUENCE

# Bold/italic toggles inside an override block, e.g. \i1, \b0, \b700
_ASS_FORMATTING_PATTERN = regex.compile(r'\\([bi])([0-9]+)(?![0-9a-z])')

def StripHtmlTags(text : str, strip_formatting : bool = False) -> str:
    """
    Remove HTML-like tags, keeping the text they enclose.
    Bold and italic tags are kept unless strip_formatting is set.
    """
    def replace(match : regex.Match) -> str:
        if not strip_formatting and match.group(2).lower() in _FORMATTING_HTML_TAGS:
            return match.group(0)
        return ''

    return _HTML_TAG_PATTERN.sub(replace, text)

def StripAssTags(text : str, strip_formatting : bool = False) -> str:
    """
    Remove SSA/ASS override blocks, keeping surrounding text.
    Bold and italic toggles are converted to HTML tags unless strip_formatting is set.
    """
    def replace(match) -> str:
        # An unterminated '{' earlier in the match is literal text, the block starts at the last '{'
        span : str = match.group(0)
        block_start = span.rfind('{')
        literal, block = span[:block_start], span[block_start:]
        if not block.startswith('{\\'):
            return span
        if strip_formatting:
            return literal
        return literal + ''.join(_ass_toggle_to_html(toggle) for toggle in _ASS_FORMATTING_PATTERN.finditer(block))

    return _ASS_BLOCK_PATTERN.sub(replace, text)

def StripAllTags(text : str, strip_formatting : bool = False) -> str:
    """
    Strip both tag families, SSA/ASS first so converted bold/italic tags are treated consistently
    """
    return StripHtmlTags(StripAssTags(text, strip_formatting), strip_formatting)

def _ass_toggle_to_html(toggle : regex.Match) -> str:
    tag, value = toggle.group(1), int(toggle.group(2))
    return f"<{tag}>" if value else f"</{tag}>"
