#!/usr/bin/env python3
"""
Accumulator and weight vector for corpus-based layout analysis.

A Stats record is created fresh for each analysis and owned by the scanner.
Classifiers never touch it directly; they return result objects that the
scanner applies through the narrow add_* operations below.
"""

from collections import Counter
from dataclasses import dataclass, field, fields
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

BIGRAM_CATEGORIES = ('sfb', 'sfr', 'lsb', 'hsb', 'fsb')
SKIPGRAM_CATEGORIES = ('sfs', 'lss', 'hss', 'fss')
TRIGRAM_CATEGORIES = ('inroll', 'outroll', 'inthreeroll', 'outthreeroll', 'alt', 'red', 'weak_red')
CATEGORY_TOKENS = BIGRAM_CATEGORIES + SKIPGRAM_CATEGORIES + TRIGRAM_CATEGORIES
NO_CATEGORY = ''

# Placeholders in n-gram table keys
NGRAM_NO_THIRD = ' '
NGRAM_GAP = '_'


def validate_category(token: Optional[str]) -> str:
    """
    Normalize a category-selection token.

    Args:
        token: Category name, or None/'' for no selection

    Returns:
        The token, or NO_CATEGORY

    Raises:
        ValueError: If the token is not a known category
    """
    if not token:
        return NO_CATEGORY
    if token not in CATEGORY_TOKENS:
        raise ValueError(f"Unknown category '{token}'. Available: {list(CATEGORY_TOKENS)}")
    return token


@dataclass
class Stats:
    """Counters and tables produced by one analysis run."""

    chars: int = 0
    bigrams: int = 0
    skipgrams: int = 0
    trigrams: int = 0

    # Bigram categories
    sfb: int = 0
    sfr: int = 0
    lsb: int = 0
    hsb: int = 0
    fsb: int = 0

    # Skipgram categories
    sfs: int = 0
    lss: int = 0
    hss: int = 0
    fss: int = 0

    # Trigram categories
    inroll: int = 0
    outroll: int = 0
    inthreeroll: int = 0
    outthreeroll: int = 0
    alt: int = 0
    red: int = 0
    weak_red: int = 0
    thumb_stat: int = 0

    fspeed: int = 0
    heatmap: int = 0
    column_pen: int = 0
    score: float = 0.0

    ngram_table: Counter = field(default_factory=Counter)
    bad_bigrams: Counter = field(default_factory=Counter)
    char_freq: Counter = field(default_factory=Counter)

    def _increment(self, category: str, amount: int = 1) -> None:
        setattr(self, category, getattr(self, category) + amount)

    def add_bigram(self, result) -> None:
        """Apply a BigramResult."""
        self.bigrams += 1
        if result.category:
            self._increment(result.category)
        self.fspeed += result.fspeed

    def add_skipgram(self, result) -> None:
        """Apply a SkipgramResult."""
        self.skipgrams += result.checks
        for category in result.categories:
            self._increment(category)
        self.fspeed += result.fspeed

    def add_trigram(self, result) -> None:
        """Apply a TrigramResult."""
        self.trigrams += 1
        if result.category:
            self._increment(result.category)
        if result.thumb:
            self.thumb_stat += 1

    def record_ngram(self, first: str, second: str, third: str) -> None:
        self.ngram_table[(first, second, third)] += 1

    def record_bad_bigram(self, first: str, second: str, weight: int) -> None:
        self.bad_bigrams[(first, second)] += weight

    def counters(self) -> Dict[str, Any]:
        """Scalar fields as a plain dict (tables excluded)."""
        return {f.name: getattr(self, f.name) for f in fields(self)
                if not isinstance(getattr(self, f.name), Counter)}


DEFAULT_WEIGHT_VALUES: Mapping[str, int] = MappingProxyType({
    'heatmap': -500,
    'column_pen': -10000,
    'fspeed': -200,
    'sfb': 0,
    'sfr': 0,
    'sfs': 0,
    'fsb': -500,
    'hsb': -100,
    'hss': -20,
    'fss': -100,
    'lsb': -200,
    'lss': -40,
    'inroll': 100,
    'outroll': 40,
    'alt': 0,
    'inthreeroll': 320,
    'outthreeroll': 160,
    'weak_red': -2000,
    'red': -300,
})


def make_weights(overrides: Optional[Mapping[str, int]] = None) -> Stats:
    """
    Build a weight vector, starting from the defaults.

    Args:
        overrides: Per-field replacements for the default weights

    Returns:
        Stats record whose numeric fields hold weights

    Raises:
        ValueError: If an override names a field that carries no weight
    """
    values = dict(DEFAULT_WEIGHT_VALUES)
    for name, value in (overrides or {}).items():
        if name not in DEFAULT_WEIGHT_VALUES:
            raise ValueError(f"Unknown weight '{name}'. Available: {list(DEFAULT_WEIGHT_VALUES)}")
        values[name] = int(value)
    return Stats(**values)


DEFAULT_WEIGHTS = make_weights()
