"""Unit string parser.

Turns free-text units such as ``"USD Million"``, ``"EUR bn per quarter"`` or
``"% of GDP"`` into a :class:`~econorm.models.ParsedUnit`. Parsing never
raises: fields that cannot be extracted stay ``None`` and leftover words are
reported in ``ParsedUnit.unparsed``.
"""

import re
from functools import lru_cache

from econorm.models import Magnitude, ParsedUnit, QuantityHint, TimeScale
from econorm.units.patterns import (
    AMBIGUOUS_CURRENCY_CODES,
    COUNT_PATTERNS,
    CURRENCY_CODES,
    CURRENCY_SYMBOLS,
    CURRENCY_WORDS,
    FILLER_WORDS,
    INDEX_PATTERNS,
    ISO_TOKEN,
    MAGNITUDE_PATTERNS,
    PER_CAPITA_PATTERN,
    PER_PHYSICAL_PATTERN,
    PERCENT_PATTERNS,
    PHYSICAL_PATTERNS,
    RATIO_PATTERNS,
    TIME_PATTERNS,
)

_WORD = re.compile(r"[a-z][a-z0-9.]*|\d+[a-z]+")


class _Scanner:
    """Lowercased view of the unit text that masks out consumed spans."""

    def __init__(self, text: str) -> None:
        self.text = text
        # Character-wise lowering keeps offsets aligned with ``text``.
        self.work = "".join(c.lower() if len(c.lower()) == 1 else c for c in text)

    def take(self, pattern: re.Pattern) -> re.Match | None:
        match = pattern.search(self.work)
        if match:
            self._mask(match.start(), match.end())
        return match

    def take_literal(self, literal: str) -> bool:
        idx = self.work.find(literal)
        if idx < 0:
            return False
        self._mask(idx, idx + len(literal))
        return True

    def _mask(self, start: int, end: int) -> None:
        self.work = self.work[:start] + " " * (end - start) + self.work[end:]

    def leftover(self) -> tuple[str, ...]:
        words = (w.strip(".") for w in _WORD.findall(self.work))
        return tuple(w for w in words if w and w not in FILLER_WORDS)


def _first_label(scanner: _Scanner, table) -> str | None:
    for pattern, label in table:
        if scanner.take(pattern):
            return label
    return None


def _all_labels(scanner: _Scanner, table) -> str | None:
    """Consume every matching pattern, returning the first label found."""
    found = None
    for pattern, label in table:
        if scanner.take(pattern) and found is None:
            found = label
    return found


def _match_currency(scanner: _Scanner) -> str | None:
    for symbol, code in CURRENCY_SYMBOLS:
        if scanner.take_literal(symbol):
            return code

    for pattern, code in CURRENCY_WORDS:
        if scanner.take(pattern):
            return code

    for match in ISO_TOKEN.finditer(scanner.work):
        code = match.group(0).upper()
        if code not in CURRENCY_CODES:
            continue
        if code in AMBIGUOUS_CURRENCY_CODES and scanner.text[match.start():match.end()] != code:
            continue
        scanner._mask(match.start(), match.end())
        return code
    return None


def _match_physical(scanner: _Scanner) -> str | None:
    for pattern, label, _family in PHYSICAL_PATTERNS:
        if scanner.take(pattern):
            return label
    return None


def _match_magnitude(scanner: _Scanner) -> Magnitude | None:
    for magnitude, pattern in MAGNITUDE_PATTERNS:
        if scanner.take(pattern):
            return magnitude
    return None


def _match_time(scanner: _Scanner) -> TimeScale | None:
    for scale, pattern in TIME_PATTERNS:
        if scanner.take(pattern):
            return scale
    return None


@lru_cache(maxsize=4096)
def parse_unit(unit_text: str | None) -> ParsedUnit:
    """Parse a free-text unit string.

    Args:
        unit_text: Raw unit as published (may be empty or ``None``).

    Returns:
        ParsedUnit with every recognized component. ``confident`` is False
        when the text was empty or some words were not recognized.
    """
    if unit_text is None or not str(unit_text).strip():
        return ParsedUnit(original="" if unit_text is None else str(unit_text), confident=False)

    text = str(unit_text).strip()
    per_physical = bool(PER_PHYSICAL_PATTERN.search(text.lower()))
    scanner = _Scanner(text)

    # Percent and per-N-people ratios first: they contain words the
    # magnitude and count tables would otherwise claim.
    percent_label = _first_label(scanner, PERCENT_PATTERNS)
    ratio_label = None if percent_label else _first_label(scanner, RATIO_PATTERNS)
    per_capita = scanner.take(PER_CAPITA_PATTERN) is not None

    currency = _match_currency(scanner)
    physical = _match_physical(scanner)
    magnitude = _match_magnitude(scanner)
    time_scale = _match_time(scanner)

    index_label = None
    count_label = None
    if not percent_label and not ratio_label:
        index_label = _all_labels(scanner, INDEX_PATTERNS)
        if not index_label:
            count_label = _first_label(scanner, COUNT_PATTERNS)

    if percent_label:
        hint, label = QuantityHint.PERCENT, percent_label
    elif ratio_label:
        hint, label = QuantityHint.RATIO, ratio_label
    elif index_label:
        hint, label = QuantityHint.INDEX, index_label
    elif count_label:
        hint, label = QuantityHint.COUNT, count_label
    else:
        hint, label = None, physical

    unparsed = scanner.leftover()
    recognized = any(
        v is not None for v in (currency, magnitude, time_scale, hint, physical)
    )

    return ParsedUnit(
        original=text,
        currency=currency,
        magnitude=magnitude,
        time_scale=time_scale,
        quantity_hint=hint,
        physical_unit=physical,
        per_physical_unit=per_physical and currency is not None,
        per_capita=per_capita,
        label=label,
        unparsed=unparsed,
        confident=recognized and not unparsed,
    )
