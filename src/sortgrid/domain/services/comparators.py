"""Ordering functions for column values.

Every comparator takes two raw values of the same column and returns a signed
number: negative when the first value sorts first, zero when they tie and
positive otherwise.  ``ComparatorRegistry`` resolves the comparator for a
column through its :class:`~sortgrid.domain.models.column.ValueType`.

Missing values (``None``) sort before everything else in all comparators so
that a sparse column never breaks a sort.
"""

from __future__ import annotations

import logging
import unicodedata
from datetime import date, datetime, time, timezone
from functools import lru_cache
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from sortgrid.config import DEFAULT_CASE_FIRST, DEFAULT_COLLATION_LOCALES
from sortgrid.domain.models.column import ColumnDescriptor, ValueType
from sortgrid.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)

Comparator = Callable[[Any, Any], float]

# Script each supported locale writes in.  Only the relative order of scripts
# is taken from the locale list; letters inside a script keep Unicode order.
LOCALE_SCRIPTS: Dict[str, str] = {
    "ru": "CYRILLIC",
    "uk": "CYRILLIC",
    "be": "CYRILLIC",
    "bg": "CYRILLIC",
    "sr": "CYRILLIC",
    "en": "LATIN",
    "de": "LATIN",
    "fr": "LATIN",
    "es": "LATIN",
    "it": "LATIN",
    "el": "GREEK",
}

# Letters that own a primary weight even though NFD splits them into a base
# letter plus a mark.
_ATOMIC_LETTERS = frozenset("йЙ")

_IGNORABLE_RANK = -2
_DIGIT_RANK = -1


def _missing_first(a: Any, b: Any) -> Optional[int]:
    if a is None and b is None:
        return 0
    if a is None:
        return -1
    if b is None:
        return 1
    return None


def compare_numbers(a: Any, b: Any) -> float:
    missing = _missing_first(a, b)
    if missing is not None:
        return missing
    return float(a) - float(b)


def to_timestamp(value: Any) -> float:
    """Convert a date-like value into POSIX seconds.

    Accepts ``datetime``/``date`` objects, epoch numbers and ISO-8601 strings
    (a trailing ``Z`` is read as UTC).  Naive values are taken as UTC.
    """
    if isinstance(value, bool):
        raise ValueError(f"Not a date: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime.combine(value, time())
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        dt = datetime.fromisoformat(text)
    else:
        raise ValueError(f"Not a date: {value!r}")
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def compare_dates(a: Any, b: Any) -> float:
    missing = _missing_first(a, b)
    if missing is not None:
        return missing
    return to_timestamp(a) - to_timestamp(b)


class LocaleCollator:
    """Case-insensitive multi-locale string comparison.

    Strings are compared in three passes, like a Unicode collation at
    tertiary strength:

    1. letters (case and accents folded away), ordering scripts by the
       configured locales, with punctuation and spaces before digits and
       digits before letters;
    2. accents, so ``е`` sorts before ``ё``;
    3. case, uppercase first by default (``case_first="upper"``).

    Instances are callables usable anywhere a :data:`Comparator` is expected.
    """

    def __init__(
        self,
        locales: Sequence[str] = DEFAULT_COLLATION_LOCALES,
        case_first: str = DEFAULT_CASE_FIRST,
    ) -> None:
        if case_first not in ("upper", "lower"):
            raise ConfigurationError(f"case_first must be 'upper' or 'lower', got {case_first!r}")
        self._locales = tuple(locales)
        self._case_first = case_first
        scripts: list[str] = []
        for locale in self._locales:
            script = LOCALE_SCRIPTS.get(locale.split("-")[0].lower())
            if script is None:
                LOGGER.debug("No script mapping for locale %s; ignoring it", locale)
                continue
            if script not in scripts:
                scripts.append(script)
        self._script_ranks = {script: rank for rank, script in enumerate(scripts)}
        self.sort_key = lru_cache(maxsize=4096)(self._sort_key)

    @property
    def locales(self) -> tuple[str, ...]:
        return self._locales

    def __call__(self, a: Any, b: Any) -> int:
        missing = _missing_first(a, b)
        if missing is not None:
            return missing
        key_a = self.sort_key(str(a))
        key_b = self.sort_key(str(b))
        return (key_a > key_b) - (key_a < key_b)

    def _script_rank(self, char: str) -> int:
        if char.isdigit():
            return _DIGIT_RANK
        if not char.isalpha():
            return _IGNORABLE_RANK
        name = unicodedata.name(char, "")
        script = name.split(" ", 1)[0]
        rank = self._script_ranks.get(script)
        if rank is None:
            return len(self._script_ranks)
        return rank

    def _case_weight(self, char: str) -> int:
        upper_first = self._case_first == "upper"
        if char.isupper():
            return 0 if upper_first else 1
        if char.islower():
            return 1 if upper_first else 0
        return 0

    def _split(self, text: str) -> list[tuple[str, str]]:
        """Break *text* into ``(base_letter, marks)`` pairs."""
        units: list[tuple[str, str]] = []
        for char in unicodedata.normalize("NFC", text):
            if char in _ATOMIC_LETTERS:
                units.append((char, ""))
                continue
            decomposed = unicodedata.normalize("NFD", char)
            base = decomposed[0]
            if unicodedata.combining(base) and units:
                prev_base, prev_marks = units[-1]
                units[-1] = (prev_base, prev_marks + decomposed)
                continue
            units.append((base, decomposed[1:]))
        return units

    def _sort_key(self, text: str) -> tuple:
        primary = []
        secondary = []
        tertiary = []
        for base, marks in self._split(text):
            folded = base.casefold()
            primary.append((self._script_rank(base), folded))
            secondary.append(tuple(ord(mark) for mark in marks))
            tertiary.append(self._case_weight(base))
        return (tuple(primary), tuple(secondary), tuple(tertiary))


class ComparatorRegistry:
    """Resolve comparators by value type."""

    def __init__(self, comparators: Optional[Mapping[ValueType, Comparator]] = None) -> None:
        self._comparators: Dict[ValueType, Comparator] = dict(comparators or {})

    @classmethod
    def default(
        cls,
        locales: Sequence[str] = DEFAULT_COLLATION_LOCALES,
        case_first: str = DEFAULT_CASE_FIRST,
    ) -> "ComparatorRegistry":
        return cls(
            {
                ValueType.NUMBER: compare_numbers,
                ValueType.DATE: compare_dates,
                ValueType.STRING: LocaleCollator(locales, case_first),
            }
        )

    def register(self, value_type: ValueType, comparator: Comparator) -> None:
        self._comparators[value_type] = comparator

    def __contains__(self, value_type: object) -> bool:
        return value_type in self._comparators

    def get(self, value_type: ValueType) -> Comparator:
        try:
            return self._comparators[value_type]
        except KeyError as exc:
            raise ConfigurationError(f"No comparator registered for value type {value_type!r}") from exc

    def validate(self, columns: Iterable[ColumnDescriptor]) -> None:
        """Fail fast when a column's value type cannot be ordered."""
        for column in columns:
            if column.value_type not in self._comparators:
                type_name = getattr(column.value_type, "value", column.value_type)
                raise ConfigurationError(
                    f"Column {column.id!r} uses value type {type_name!r} "
                    "which has no registered comparator"
                )

    def for_column(self, column: ColumnDescriptor) -> Comparator:
        return self.get(column.value_type)
