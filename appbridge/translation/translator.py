"""
translation/translator.py - Translator with placeholder and plural support

Keys take the form 'group.item', 'namespace::group.item', or a full
sentence looked up in the locale's flat JSON file.

Plural lines separate forms with '|' and may carry explicit conditions:

    "apple|apples"
    "{0} No apples|[1,19] Some apples|[20,*] Many apples"

When no condition matches, the form is chosen with the CLDR plural rules of
the locale (via Babel).
"""

from __future__ import annotations
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import re

from babel import Locale
from babel.core import UnknownLocaleError

logger = logging.getLogger("translation.translator")

_LOCALE_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")
_CONDITION = re.compile(r"^\s*([\{\[])([^\[\]\{\}]*)([\}\]])(.*)$", re.DOTALL)
_CATEGORY_ORDER = ("zero", "one", "two", "few", "many", "other")


def plural_index(locale: str, number: float) -> int:
    """
    Get the index of the plural form for number in locale.

    Forms are ordered zero, one, two, few, many, other, keeping only those
    the locale defines. Unknown locales use the English rule.
    """
    try:
        rule = Locale.parse(locale.replace("-", "_")).plural_form
    except (UnknownLocaleError, ValueError):
        return 0 if number == 1 else 1

    category = rule(abs(number))
    tags = [tag for tag in _CATEGORY_ORDER if tag in rule.tags or tag == "other"]
    return tags.index(category)


class MessageSelector:
    """Picks the plural form of a line for a number."""

    def choose(self, line: str, number: float, locale: str) -> str:
        segments = line.split("|")

        explicit = self._extract(segments, number)
        if explicit is not None:
            return explicit.strip()

        segments = [self._strip_condition(segment) for segment in segments]

        if len(segments) == 1:
            return segments[0]

        index = plural_index(locale, number)
        if index >= len(segments):
            return segments[0]
        return segments[index]

    def _extract(self, segments: Sequence[str], number: float) -> Optional[str]:
        for segment in segments:
            match = _CONDITION.match(segment)
            if match is None:
                continue
            opening, condition, closing, value = match.groups()
            if self._matches(opening, condition, number):
                return value
        return None

    @staticmethod
    def _matches(opening: str, condition: str, number: float) -> bool:
        try:
            if opening == "{":
                values = [part.strip() for part in condition.split(",")]
                return any(part != "*" and float(part) == number for part in values)

            if "," not in condition:
                return False
            start, end = (part.strip() for part in condition.split(",", 1))
            if end == "*":
                return number >= float(start)
            if start == "*":
                return number <= float(end)
            return float(start) <= number <= float(end)
        except ValueError:
            # Non-numeric braces such as '{count}' are plain text
            return False

    @staticmethod
    def _strip_condition(segment: str) -> str:
        match = _CONDITION.match(segment)
        return (match.group(4) if match else segment).strip()


class Translator:
    """
    Translates keys using lines from a loader.

    Usage:
        translator = Translator(FileLoader(files, "lang"), "en")
        translator.get("messages.welcome", {"name": "ada"})
        translator.choice("messages.apples", 3)
    """

    def __init__(self, loader, locale: str = "en", fallback: Optional[str] = None):
        self._loader = loader
        self._locale = self._validate_locale(locale)
        self._fallback = self._validate_locale(fallback) if fallback else None
        self._loaded: Dict[Tuple[str, str, str], Dict[str, Any]] = {}
        self._selector = MessageSelector()

    # ------------------------------------------------------------------
    # Locale
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_locale(locale: str) -> str:
        if not isinstance(locale, str) or not _LOCALE_PATTERN.match(locale):
            raise ValueError(f"Invalid locale: {locale!r}")
        return locale

    def get_locale(self) -> str:
        return self._locale

    def set_locale(self, locale: str) -> None:
        self._locale = self._validate_locale(locale)
        logger.debug(f"Locale set to {locale}")

    @property
    def locale(self) -> str:
        return self._locale

    def get_fallback(self) -> Optional[str]:
        return self._fallback

    def set_fallback(self, fallback: Optional[str]) -> None:
        self._fallback = self._validate_locale(fallback) if fallback else None

    def get_loader(self):
        return self._loader

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(
        self,
        key: str,
        replace: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
        fallback: bool = True,
    ) -> Any:
        """
        Get the translation for a key.

        Returns:
            The translated line, a dict for a whole group, or key itself
        """
        replace = replace or {}

        for candidate in self._locales(locale, fallback):
            json_lines = self._load("*", "*", candidate)
            line = json_lines.get(key)
            if isinstance(line, str):
                return self.make_replacements(line, replace)

            namespace, group, item = self.parse_key(key)
            line = self._get_line(namespace, group, candidate, item, replace)
            if line is not None:
                return line

        return self.make_replacements(key, replace)

    trans = get

    def has(self, key: str, locale: Optional[str] = None, fallback: bool = True) -> bool:
        return self.get(key, {}, locale, fallback) != key

    def choice(
        self,
        key: str,
        number: Union[int, float, Sequence[Any]],
        replace: Optional[Mapping[str, Any]] = None,
        locale: Optional[str] = None,
    ) -> str:
        """
        Get the plural form of a line for number.

        A sequence counts as its length. ':count' is available as a replacement.
        """
        if isinstance(number, (list, tuple, set, dict)):
            number = len(number)

        line = self.get(key, {}, locale)
        replacements = dict(replace or {})
        replacements.setdefault("count", number)

        chosen = self._selector.choose(str(line), number, locale or self._locale)
        return self.make_replacements(chosen, replacements)

    trans_choice = choice

    def add_lines(self, lines: Mapping[str, str], locale: str, namespace: str = "*") -> None:
        """Add lines at runtime. Keys are 'group.item'."""
        for key, value in lines.items():
            group, _, item = key.partition(".")
            bucket = self._load(namespace, group, locale)
            self._assign(bucket, item, value)

    def add_namespace(self, namespace: str, hint: str) -> None:
        self._loader.add_namespace(namespace, hint)

    def parse_key(self, key: str) -> Tuple[str, str, Optional[str]]:
        """Split a key into (namespace, group, item)."""
        namespace = "*"
        if "::" in key:
            namespace, key = key.split("::", 1)
        group, _, item = key.partition(".")
        return namespace, group, item or None

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _locales(self, locale: Optional[str], fallback: bool) -> List[str]:
        primary = self._validate_locale(locale) if locale else self._locale
        locales = [primary]
        if fallback and self._fallback and self._fallback != primary:
            locales.append(self._fallback)
        return locales

    def _load(self, namespace: str, group: str, locale: str) -> Dict[str, Any]:
        cache_key = (namespace, group, locale)
        if cache_key not in self._loaded:
            self._loaded[cache_key] = self._loader.load(locale, group, namespace)
        return self._loaded[cache_key]

    def _get_line(
        self,
        namespace: str,
        group: str,
        locale: str,
        item: Optional[str],
        replace: Mapping[str, Any],
    ) -> Any:
        lines = self._load(namespace, group, locale)

        if item is None:
            return lines or None

        line: Any = lines
        for part in item.split("."):
            if isinstance(line, dict) and part in line:
                line = line[part]
            else:
                return None

        if isinstance(line, str):
            return self.make_replacements(line, replace)
        if isinstance(line, dict):
            return line
        return None

    @staticmethod
    def _assign(bucket: Dict[str, Any], item: str, value: Any) -> None:
        parts = item.split(".")
        for part in parts[:-1]:
            bucket = bucket.setdefault(part, {})
        bucket[parts[-1]] = value

    @staticmethod
    def make_replacements(line: str, replace: Mapping[str, Any]) -> str:
        """Replace :key, :Key and :KEY placeholders."""
        if not replace:
            return line

        for key in sorted(replace, key=len, reverse=True):
            value = str(replace[key])
            line = line.replace(":" + key.upper(), value.upper())
            line = line.replace(":" + key[:1].upper() + key[1:], value[:1].upper() + value[1:])
            line = line.replace(":" + key, value)
        return line
