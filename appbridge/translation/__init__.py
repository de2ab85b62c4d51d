"""
translation/ - Translation lines and pluralization (Babel)
"""

from .loader import FileLoader
from .translator import MessageSelector, Translator, plural_index
from .provider import TranslationServiceProvider

__all__ = [
    "FileLoader",
    "MessageSelector",
    "Translator",
    "plural_index",
    "TranslationServiceProvider",
]
