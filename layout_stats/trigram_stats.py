#!/usr/bin/env python3
"""
Trigram classification: rolls, alternation and redirects.

Fingers are ordered from the outside of the hand inward (pinky -> thumb); a
motion is "in" when the finger order increases. For three consecutive keys:

  - alt           the hand changes at both steps
  - inroll        one same-hand pair on distinct fingers moving inward,
    outroll       the third key on the other hand (or outward)
  - inthreeroll   all three keys on one hand, distinct fingers, one direction
    outthreeroll
  - red           all three keys on one hand, direction reverses
  - weak_red      a redirect that does not use the index finger

Triples containing a thumb key count toward alt only when thumb alternation
is enabled, and toward the roll/redirect categories only when thumb rolls
are enabled.
"""

from dataclasses import dataclass

from layout_stats.layout_utils import Finger, Key, is_same_hand
from layout_stats.stats import NO_CATEGORY


@dataclass(frozen=True)
class TrigramResult:
    """Outcome of classifying one key triple."""
    category: str = NO_CATEGORY
    thumb: bool = False
    record: bool = False


def _direction(key1: Key, key2: Key) -> int:
    return (key2.finger > key1.finger) - (key2.finger < key1.finger)


def trigram_category(key1: Key, key2: Key, key3: Key) -> str:
    """
    Category of a triple of real keys, ignoring thumb settings.

    Returns:
        Category name, or NO_CATEGORY for triples with a same-finger step
    """
    same_first = is_same_hand(key1, key2)
    same_second = is_same_hand(key2, key3)

    if not same_first and not same_second:
        return 'alt'

    if same_first and same_second:
        first, second = _direction(key1, key2), _direction(key2, key3)
        if first == 0 or second == 0:
            return NO_CATEGORY
        if first == second:
            return 'inthreeroll' if first > 0 else 'outthreeroll'
        if Finger.INDEX in (key1.finger, key2.finger, key3.finger):
            return 'red'
        return 'weak_red'

    direction = _direction(key1, key2) if same_first else _direction(key2, key3)
    if direction > 0:
        return 'inroll'
    if direction < 0:
        return 'outroll'
    return NO_CATEGORY


def classify_trigram(key1: Key, key2: Key, key3: Key,
                     category: str = NO_CATEGORY,
                     include_thumb_alt: bool = False,
                     include_thumb_roll: bool = False) -> TrigramResult:
    """
    Classify the triple ending at the current keystroke.

    Args:
        key1: Key typed two keystrokes ago
        key2: Key typed one keystroke ago
        key3: Current key
        category: Category whose matches should be recorded in the n-gram table
        include_thumb_alt: Credit alternation for triples that use a thumb
        include_thumb_roll: Credit rolls and redirects for triples that use a thumb

    Returns:
        TrigramResult with the matched category and whether the current
        keystroke was typed with a thumb
    """
    thumb = key3.is_thumb
    if key1.is_sentinel or key2.is_sentinel or key3.is_sentinel:
        return TrigramResult(thumb=thumb)

    matched = trigram_category(key1, key2, key3)
    if matched and (key1.is_thumb or key2.is_thumb or key3.is_thumb):
        allowed = include_thumb_alt if matched == 'alt' else include_thumb_roll
        if not allowed:
            matched = NO_CATEGORY

    return TrigramResult(matched, thumb=thumb, record=bool(matched) and matched == category)
