#!/usr/bin/env python3
"""
Bigram and skipgram classification.

Each adjacent key pair falls into at most one category, checked in priority
order:

  1. sfb  same-finger bigram (same finger, different key)
  2. sfr  same-finger repeat (identical key)
  3. lsb  lateral-stretch bigram (same hand, a lateral column involved)
  4. hsb  half scissor (pinky/index against middle/ring, one row apart)
  5. fsb  full scissor (same fingers, two rows apart)

Skipgrams (one keystroke apart) use the same order with their own counters.
Same-finger motions also add to the finger-travel cost (fspeed).
"""

import math
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from layout_stats.layout_utils import Finger, Key, LayoutGeometryError, THUMB_ROW
from layout_stats.stats import NO_CATEGORY

FINGER_WEIGHTS: Mapping[Finger, int] = MappingProxyType({
    Finger.PINKY: 66,
    Finger.RING: 28,
    Finger.MIDDLE: 21,
    Finger.INDEX: 18,
    Finger.THUMB: 50,
})

SFB_COST_FACTOR = 5
SFR_COST_FACTOR = 2
SFS_COST_FACTOR = 1

LATERAL_WEIGHT = 30
HALF_SCISSOR_WEIGHT = 30
FULL_SCISSOR_WEIGHT = 90

HALF_SCISSOR = 1
FULL_SCISSOR = 2

OUTER_FINGERS = frozenset({Finger.PINKY, Finger.INDEX})
INNER_FINGERS = frozenset({Finger.MIDDLE, Finger.RING})


@dataclass(frozen=True)
class BigramResult:
    """Outcome of classifying one adjacent key pair."""
    category: str = NO_CATEGORY
    fspeed: int = 0
    weight: int = 0
    record: bool = False

    @property
    def is_bad(self) -> bool:
        return bool(self.category)


@dataclass(frozen=True)
class SkipgramResult:
    """Outcome of the skipgram checks for one keystroke."""
    categories: Tuple[str, ...] = ()
    fspeed: int = 0
    checks: int = 1
    record: bool = False


def sf(key1: Key, key2: Key) -> bool:
    """Same finger on the same hand, but not the same key."""
    return (key1.finger == key2.finger
            and key1.hand == key2.hand
            and key1 != key2
            and not key1.is_sentinel)


def ls(key1: Key, key2: Key) -> bool:
    """Same-hand pair involving a lateral column, thumbs excluded."""
    return ((key1.lateral or key2.lateral)
            and key1.hand == key2.hand
            and not key1.is_sentinel
            and not key1.is_thumb
            and not key2.is_thumb)


def scissor(key1: Key, key2: Key) -> int:
    """
    Scissor severity of a key pair.

    Returns the row distance when an outer finger (pinky/index) pairs with an
    inner finger (middle/ring) on the same hand, else 0. A distance of 1 is a
    half scissor and 2 a full scissor.

    Raises:
        LayoutGeometryError: If the row distance cannot occur on the physical model
    """
    distance = abs(key1.row - key2.row)
    if distance > THUMB_ROW:
        raise LayoutGeometryError(
            f"Invalid row distance {distance} between {key1} and {key2}; "
            f"rows must lie between 0 and {THUMB_ROW}"
        )

    if key1.hand != key2.hand or key1.is_sentinel or key1.finger == key2.finger:
        return 0
    if ((key1.finger in OUTER_FINGERS and key2.finger in INNER_FINGERS)
            or (key2.finger in OUTER_FINGERS and key1.finger in INNER_FINGERS)):
        return distance
    return 0


def travel_distance(key1: Key, key2: Key) -> int:
    """Row travel of a same-finger motion; a lateral change counts as a diagonal."""
    dy = abs(key1.row - key2.row)
    if key1.lateral == key2.lateral:
        return max(dy, 1)
    return math.isqrt(dy * dy + 1)


def classify_bigram(key1: Key, key2: Key, category: str = NO_CATEGORY) -> BigramResult:
    """
    Classify an adjacent key pair.

    Args:
        key1: Key typed first
        key2: Key typed second
        category: Category whose matches should be recorded in the n-gram table

    Returns:
        BigramResult with the matched category (if any), its travel cost and
        its bad-bigram weight
    """
    if sf(key1, key2):
        cost = SFB_COST_FACTOR * FINGER_WEIGHTS[key1.finger] * travel_distance(key1, key2)
        return BigramResult('sfb', fspeed=cost, weight=cost, record=category == 'sfb')

    if key1 == key2 and not key1.is_sentinel:
        cost = SFR_COST_FACTOR * FINGER_WEIGHTS[key1.finger]
        return BigramResult('sfr', fspeed=cost, weight=cost, record=category == 'sfr')

    if ls(key1, key2):
        return BigramResult('lsb', weight=LATERAL_WEIGHT, record=category == 'lsb')

    severity = scissor(key1, key2)
    if severity == HALF_SCISSOR:
        return BigramResult('hsb', weight=HALF_SCISSOR_WEIGHT, record=category == 'hsb')
    if severity == FULL_SCISSOR:
        return BigramResult('fsb', weight=FULL_SCISSOR_WEIGHT, record=category == 'fsb')

    return BigramResult()


def _classify_skip_pair(key1: Key, key2: Key) -> Tuple[str, int]:
    # identical keys are a skip repeat, which has no counter
    if key1 == key2:
        return NO_CATEGORY, 0
    if sf(key1, key2):
        cost = SFS_COST_FACTOR * FINGER_WEIGHTS[key1.finger] * travel_distance(key1, key2)
        return 'sfs', cost
    if ls(key1, key2):
        return 'lss', 0

    severity = scissor(key1, key2)
    if severity == HALF_SCISSOR:
        return 'hss', 0
    if severity == FULL_SCISSOR:
        return 'fss', 0
    return NO_CATEGORY, 0


def _classify_epic_pair(epic_key: Key, key: Key) -> Tuple[str, ...]:
    # same-hand pair spanning an opposite-hand keystroke; each check counts on
    # its own and half scissors are not counted
    if epic_key == key:
        return ()
    categories = []
    if sf(epic_key, key):
        categories.append('sfs')
    if ls(key, epic_key):
        categories.append('lss')
    if scissor(key, epic_key) == FULL_SCISSOR:
        categories.append('fss')
    return tuple(categories)


def classify_skipgram(skip_key: Key, key: Key, epic_key: Key,
                      category: str = NO_CATEGORY) -> SkipgramResult:
    """
    Classify the skipgram ending at the current keystroke.

    The pair (skip_key, key) is always checked. When epic_key (the last
    opposite-hand anchor) is on the same hand as key, that pair is checked
    too and counts as a second skipgram. Its sfs, lss and fss checks are
    independent, so one anchor pair can match several categories.

    Args:
        skip_key: Key typed two keystrokes ago
        key: Current key
        epic_key: Key of the last opposite-hand anchor
        category: Category whose matches should be recorded in the n-gram table

    Returns:
        SkipgramResult with matched categories, travel cost and check count
    """
    categories = []
    checks = 1

    skip_category, fspeed = _classify_skip_pair(skip_key, key)
    if skip_category:
        categories.append(skip_category)

    if epic_key.hand == key.hand and not epic_key.is_sentinel:
        checks += 1
        categories.extend(_classify_epic_pair(epic_key, key))

    record = bool(category) and category in categories
    return SkipgramResult(tuple(categories), fspeed=fspeed, checks=checks, record=record)
