#!/usr/bin/env python3
"""
Corpus replay analysis of a 32-key layout.

analyze() runs the whole pipeline for one layout:

  1. build the character -> Key table
  2. collapse magic-rule digraphs in the corpus (optional)
  3. scan the corpus once, classifying every bigram, skipgram and trigram
  4. reduce character frequencies to a heatmap and a column-overuse penalty
  5. combine the counters into a single weighted score

Every call owns its own Stats, lookup table and cursors. Only the
module-level constants are shared.
"""

import logging
from collections import defaultdict
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Sequence, Tuple

import numpy as np

from layout_stats.bigram_stats import classify_bigram, classify_skipgram
from layout_stats.config_loader import ScoringOptions
from layout_stats.layout_utils import (
    Finger, Key, SENTINEL, build_layout_table, lookup_key,
)
from layout_stats.stats import (
    DEFAULT_WEIGHTS, NGRAM_GAP, NGRAM_NO_THIRD, Stats, validate_category,
)
from layout_stats.text_utils import FILLER, apply_magic_rules
from layout_stats.trigram_stats import classify_trigram

logger = logging.getLogger(__name__)

# Per-slot cost of using a position, in canonical slot order
HEATMAP_WEIGHTING = np.array([
    12, 4, 3, 6, 7, 7, 6, 3, 4, 12,
    3, 1, 0, 0, 6, 6, 0, 0, 1, 3,
    8, 9, 8, 4, 9, 9, 4, 8, 9, 8,
    0, 0,
], dtype=np.int64)
HEATMAP_WEIGHTING.setflags(write=False)

# Largest share (percent of all characters) one column may take before it is penalized
MAX_FINGER_FREQUENCY: Mapping[Finger, int] = MappingProxyType({
    Finger.PINKY: 7,
    Finger.RING: 12,
    Finger.MIDDLE: 13,
    Finger.INDEX: 13,
    Finger.THUMB: 25,
})

FSPEED_DIVISOR = 7
HEATMAP_DIVISOR = 100

SCORED_FIELDS = (
    'column_pen',
    'lsb', 'lss',
    'hsb', 'hss',
    'fsb', 'fss',
    'inroll', 'outroll',
    'inthreeroll', 'outthreeroll',
    'alt',
    'red', 'weak_red',
)


def advances_epic(epic_key: Key, key: Key, hand_inequality: bool = False) -> bool:
    """
    Decide whether the current key becomes the new opposite-hand anchor.

    By default the bitwise complement of the anchor's 8-bit hand value is
    compared with the current hand, which never matches a real hand (0 or 1),
    so the anchor stays at the sentinel. With hand_inequality the anchor
    moves whenever the hands differ.
    """
    if hand_inequality:
        return epic_key.hand != key.hand
    return (~epic_key.hand & 0xFF) == key.hand


def scan_corpus(corpus: str,
                table: Dict[str, Key],
                category: str = '',
                options: Optional[ScoringOptions] = None) -> Stats:
    """
    Replay a corpus over a layout table in a single pass.

    Args:
        corpus: Text to replay (already rewritten by the magic rules, if any)
        table: Character -> Key lookup table including the sentinel
        category: Category whose matches are recorded in the n-gram table
        options: Counting switches

    Returns:
        Stats with character and n-gram counters filled in

    Raises:
        UnmappedCharacterError: If a corpus character is not on the layout
    """
    options = options or ScoringOptions()
    stats = Stats()
    previous = skip_previous = epic_previous = SENTINEL
    filler_is_key = FILLER in table

    for position, letter in enumerate(corpus):
        if letter == FILLER and not filler_is_key:
            continue

        key = lookup_key(table, letter, position)
        previous_key = table[previous]
        skip_previous_key = table[skip_previous]
        epic_previous_key = table[epic_previous]

        stats.chars += 1
        stats.char_freq[letter] += 1

        bigram = classify_bigram(previous_key, key, category)
        stats.add_bigram(bigram)
        if bigram.record:
            stats.record_ngram(previous, letter, NGRAM_NO_THIRD)
        if options.track_bad_bigrams and bigram.is_bad:
            stats.record_bad_bigram(previous, letter, bigram.weight)

        skipgram = classify_skipgram(skip_previous_key, key, epic_previous_key, category)
        stats.add_skipgram(skipgram)
        if skipgram.record:
            stats.record_ngram(skip_previous, NGRAM_GAP, letter)

        trigram = classify_trigram(skip_previous_key, previous_key, key, category,
                                   include_thumb_alt=options.include_thumb_alt,
                                   include_thumb_roll=options.include_thumb_roll)
        stats.add_trigram(trigram)
        if trigram.record:
            stats.record_ngram(skip_previous, previous, letter)

        if advances_epic(epic_previous_key, key, options.epic_hand_inequality):
            epic_previous = letter
        skip_previous = previous
        previous = letter

    if options.exclude_thumb_chars:
        stats.chars -= stats.thumb_stat

    return stats


def column_frequencies(layout_letters: Sequence[str],
                       table: Dict[str, Key],
                       char_freq: Mapping[str, int]) -> Dict[Tuple[Finger, int], int]:
    """
    Sum character frequencies per (finger, hand) column.

    Returns:
        Dict mapping (finger, hand) to the number of keystrokes on that column
    """
    columns: Dict[Tuple[Finger, int], int] = defaultdict(int)
    for letter in layout_letters:
        freq = char_freq.get(letter, 0)
        if freq:
            key = table[letter]
            columns[(key.finger, key.hand)] += freq
    return dict(columns)


def column_penalty(finger: Finger, freq: int, chars: int) -> int:
    """Keystrokes on a column beyond its allowed share of all characters."""
    allowed = MAX_FINGER_FREQUENCY[finger] * chars / 100
    return int(max(freq - allowed, 0))


def reduce_heatmap(stats: Stats, layout_letters: Sequence[str], table: Dict[str, Key]) -> Stats:
    """
    Fill in the heatmap and column penalty from the scanned frequencies.

    Args:
        stats: Stats after scan_corpus()
        layout_letters: 32 characters in canonical slot order
        table: Lookup table built from layout_letters

    Returns:
        The same Stats, updated in place
    """
    freqs = np.array([stats.char_freq.get(letter, 0) for letter in layout_letters], dtype=np.int64)
    stats.heatmap = int(np.dot(HEATMAP_WEIGHTING, freqs))

    columns = column_frequencies(layout_letters, table, stats.char_freq)
    stats.column_pen = sum(column_penalty(finger, freq, stats.chars)
                           for (finger, _hand), freq in columns.items())
    return stats


def _div_trunc(numerator: int, denominator: int) -> int:
    # integer division rounding toward zero
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def score(stats: Stats, weights: Stats = DEFAULT_WEIGHTS) -> float:
    """
    Weighted sum of the counters.

    Finger travel is divided by 7 and the heatmap by 100 before weighting;
    every other scored field is multiplied by its weight directly. The sum is
    accumulated in integers.

    Args:
        stats: Stats after scanning and reduction
        weights: Stats-shaped weight vector

    Returns:
        Layout score (higher is better)
    """
    total = 0
    total += _div_trunc(stats.fspeed * weights.fspeed, FSPEED_DIVISOR)
    total += _div_trunc(stats.heatmap * weights.heatmap, HEATMAP_DIVISOR)
    for name in SCORED_FIELDS:
        total += getattr(stats, name) * getattr(weights, name)
    return float(total)


def analyze(corpus: str,
            layout_letters: Sequence[str],
            category: Optional[str] = None,
            magic_rules: Optional[Mapping[str, str]] = None,
            options: Optional[ScoringOptions] = None,
            weights: Optional[Stats] = None) -> Stats:
    """
    Analyze a corpus typed on a layout.

    Args:
        corpus: Text to replay
        layout_letters: 32 characters in canonical slot order
        category: Category whose matches are recorded in the n-gram table
            (e.g. 'sfb', 'lss', 'red'), or None
        magic_rules: Digraph rules (character -> paired character); None
            disables digraph rewriting
        options: Counting switches (thumb crediting, bad-bigram tracking)
        weights: Weight vector for the final score (defaults to DEFAULT_WEIGHTS)

    Returns:
        Fully populated Stats including the score

    Raises:
        LayoutError: If the layout is not 32 single characters
        UnmappedCharacterError: If the corpus contains a character not on the layout
        ValueError: If the category is unknown
    """
    category = validate_category(category)
    options = options or ScoringOptions()
    weights = weights if weights is not None else DEFAULT_WEIGHTS

    table = build_layout_table(layout_letters)

    if magic_rules is not None:
        corpus = apply_magic_rules(corpus, layout_letters, magic_rules)

    stats = scan_corpus(corpus, table, category, options)
    reduce_heatmap(stats, layout_letters, table)
    stats.score = score(stats, weights)

    logger.debug(f"Analyzed {stats.chars:,} characters: score {stats.score:.1f}, "
                 f"sfb {stats.sfb}, sfs {stats.sfs}, column penalty {stats.column_pen}")
    return stats
