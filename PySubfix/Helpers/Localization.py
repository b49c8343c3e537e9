import gettext
import logging
import os

_domain = "pysubfix"
_locales_dir = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "locales")
_translation : gettext.NullTranslations = gettext.NullTranslations()

def initialize_localization(language : str|None = None) -> None:
    """
    Load the message catalogue for the requested language (or the environment's language).
    Falls back to the untranslated messages if no catalogue is installed.
    """
    global _translation
    languages = [language] if language else None
    _translation = gettext.translation(_domain, localedir=_locales_dir, languages=languages, fallback=True)
    if isinstance(_translation, gettext.GNUTranslations):
        logging.debug(f"Loaded {_domain} translations for {language or 'default locale'}")

def _(text : str) -> str:
    """ Translate a user-visible message """
    return _translation.gettext(text)
