#!/usr/bin/env python3
"""
Layout utilities for corpus-based layout analysis.

Defines the physical key model (hand, finger, row, lateral column) and turns
a 32-character layout string into a character -> Key lookup table.

Canonical slot order (hand 0 = left, hand 1 = right):

    slots  0-9   top row     L: pinky ring middle index index-lateral
                             R: index-lateral index middle ring pinky
    slots 10-19  home row    (same columns)
    slots 20-29  bottom row  (same columns)
    slot  30     left thumb
    slot  31     right thumb
"""

import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

LAYOUT_SIZE = 32
THUMB_ROW = 3

# Stands in for "no prior keystroke" before the corpus has produced enough characters
SENTINEL = '\0'
NO_HAND = 2


class LayoutError(ValueError):
    """Raised when a layout cannot be turned into a lookup table."""


class LayoutGeometryError(LayoutError):
    """Raised when key geometry produces an impossible row distance."""


class UnmappedCharacterError(KeyError):
    """Raised when a corpus character has no key on the layout."""

    def __init__(self, char: str, position: Optional[int] = None):
        self.char = char
        self.position = position
        where = f" at corpus position {position}" if position is not None else ""
        super().__init__(f"Unmapped character {char!r}{where}: not present on the layout")

    def __str__(self) -> str:
        return self.args[0]


class Finger(IntEnum):
    """Fingers ordered from the outside of the hand toward the thumb."""
    PINKY = 0
    RING = 1
    MIDDLE = 2
    INDEX = 3
    THUMB = 4


@dataclass(frozen=True)
class Key:
    """Physical key descriptor. Equality is structural."""
    hand: int
    finger: Optional[Finger]
    row: int
    lateral: bool = False

    @property
    def is_sentinel(self) -> bool:
        return self.hand == NO_HAND

    @property
    def is_thumb(self) -> bool:
        return self.finger == Finger.THUMB


SENTINEL_KEY = Key(hand=NO_HAND, finger=None, row=0, lateral=False)


def _row_geometry(row: int) -> List[Key]:
    """Ten keys of one alphabetic row in canonical slot order."""
    left = [
        Key(0, Finger.PINKY, row),
        Key(0, Finger.RING, row),
        Key(0, Finger.MIDDLE, row),
        Key(0, Finger.INDEX, row),
        Key(0, Finger.INDEX, row, lateral=True),
    ]
    right = [
        Key(1, Finger.INDEX, row, lateral=True),
        Key(1, Finger.INDEX, row),
        Key(1, Finger.MIDDLE, row),
        Key(1, Finger.RING, row),
        Key(1, Finger.PINKY, row),
    ]
    return left + right


SLOT_GEOMETRY: Tuple[Key, ...] = tuple(
    _row_geometry(0) + _row_geometry(1) + _row_geometry(2) + [
        Key(0, Finger.THUMB, THUMB_ROW),
        Key(1, Finger.THUMB, THUMB_ROW),
    ]
)


def validate_layout_letters(layout_letters: Sequence[str]) -> List[str]:
    """
    Check a layout sequence for problems without raising.

    Args:
        layout_letters: 32 characters in canonical slot order

    Returns:
        List of issue messages (empty if the layout is clean)
    """
    issues = []

    if len(layout_letters) != LAYOUT_SIZE:
        issues.append(f"Layout must have {LAYOUT_SIZE} characters, got {len(layout_letters)}")

    for slot, char in enumerate(layout_letters):
        if len(char) != 1:
            issues.append(f"Slot {slot} holds {char!r}; expected a single character")
        elif char == SENTINEL:
            issues.append(f"Slot {slot} holds the reserved sentinel character")

    seen = {}
    for slot, char in enumerate(layout_letters):
        if char in seen:
            issues.append(f"Duplicate character {char!r} in slots {seen[char]} and {slot}")
        seen[char] = slot

    return issues


def find_duplicate_letters(layout_letters: Sequence[str]) -> List[str]:
    """Return characters that occupy more than one slot, in slot order."""
    counts: Dict[str, int] = {}
    for char in layout_letters:
        counts[char] = counts.get(char, 0) + 1
    return [char for char, count in counts.items() if count > 1]


def build_layout_table(layout_letters: Sequence[str]) -> Dict[str, Key]:
    """
    Build the character -> Key lookup table for a layout.

    A character that appears in more than one slot keeps only its last slot;
    the earlier mapping is discarded with a warning.

    Args:
        layout_letters: 32 characters (a string or a list) in canonical slot order

    Returns:
        Dict mapping every layout character plus SENTINEL to its Key

    Raises:
        LayoutError: If the layout does not have exactly 32 single characters
    """
    if len(layout_letters) != LAYOUT_SIZE:
        raise LayoutError(f"Layout must have {LAYOUT_SIZE} characters, got {len(layout_letters)}")

    for slot, char in enumerate(layout_letters):
        if len(char) != 1 or char == SENTINEL:
            raise LayoutError(f"Invalid character {char!r} in layout slot {slot}")

    duplicates = find_duplicate_letters(layout_letters)
    if duplicates:
        logger.warning(f"Duplicate layout characters {duplicates}: later slots override earlier ones")

    table = {SENTINEL: SENTINEL_KEY}
    for char, key in zip(layout_letters, SLOT_GEOMETRY):
        table[char] = key

    return table


def lookup_key(table: Dict[str, Key], char: str, position: Optional[int] = None) -> Key:
    """
    Resolve a character to its Key.

    Raises:
        UnmappedCharacterError: If the character is not on the layout or is
            the reserved sentinel
    """
    if char == SENTINEL:
        raise UnmappedCharacterError(char, position)
    try:
        return table[char]
    except KeyError:
        raise UnmappedCharacterError(char, position) from None


def is_same_hand(key1: Key, key2: Key) -> bool:
    """Check whether two real keys are typed by the same hand."""
    return key1.hand == key2.hand and not key1.is_sentinel


def format_layout_rows(layout_letters: Sequence[str]) -> str:
    """
    Render a layout as three rows plus the thumb keys.

    Args:
        layout_letters: 32 characters in canonical slot order

    Returns:
        Multi-line string, e.g. "q w e r t  y u i o p"
    """
    lines = []
    for row in range(3):
        cells = list(layout_letters[row * 10:(row + 1) * 10])
        lines.append(' '.join(cells[:5]) + '  ' + ' '.join(cells[5:]))
    lines.append(f"      {layout_letters[30]}    {layout_letters[31]}")
    return '\n'.join(lines)
