#!/usr/bin/env python3
# tests/test_layout_utils.py - Unit tests for layout_utils.py

import pytest

from layout_stats.layout_utils import (
    Finger, Key, LayoutError, SENTINEL, SENTINEL_KEY, SLOT_GEOMETRY, UnmappedCharacterError,
    build_layout_table, find_duplicate_letters, format_layout_rows, is_same_hand, lookup_key,
    validate_layout_letters,
)
from tests.conftest import QWERTY


class TestSlotGeometry:
    """The fixed slot -> Key assignment"""

    def test_has_32_slots(self):
        assert len(SLOT_GEOMETRY) == 32

    def test_left_top_row(self):
        assert SLOT_GEOMETRY[0] == Key(0, Finger.PINKY, 0, False)
        assert SLOT_GEOMETRY[1] == Key(0, Finger.RING, 0, False)
        assert SLOT_GEOMETRY[2] == Key(0, Finger.MIDDLE, 0, False)
        assert SLOT_GEOMETRY[3] == Key(0, Finger.INDEX, 0, False)
        assert SLOT_GEOMETRY[4] == Key(0, Finger.INDEX, 0, True)

    def test_right_home_row_mirrors_left(self):
        assert SLOT_GEOMETRY[15] == Key(1, Finger.INDEX, 1, True)
        assert SLOT_GEOMETRY[16] == Key(1, Finger.INDEX, 1, False)
        assert SLOT_GEOMETRY[17] == Key(1, Finger.MIDDLE, 1, False)
        assert SLOT_GEOMETRY[18] == Key(1, Finger.RING, 1, False)
        assert SLOT_GEOMETRY[19] == Key(1, Finger.PINKY, 1, False)

    def test_bottom_row(self):
        assert SLOT_GEOMETRY[20] == Key(0, Finger.PINKY, 2, False)
        assert SLOT_GEOMETRY[24] == Key(0, Finger.INDEX, 2, True)
        assert SLOT_GEOMETRY[25] == Key(1, Finger.INDEX, 2, True)
        assert SLOT_GEOMETRY[29] == Key(1, Finger.PINKY, 2, False)

    def test_thumb_keys(self):
        assert SLOT_GEOMETRY[30] == Key(0, Finger.THUMB, 3, False)
        assert SLOT_GEOMETRY[31] == Key(1, Finger.THUMB, 3, False)

    def test_lateral_columns(self):
        lateral_slots = [i for i, key in enumerate(SLOT_GEOMETRY) if key.lateral]
        assert lateral_slots == [4, 5, 14, 15, 24, 25]


class TestBuildLayoutTable:

    def test_maps_every_character_plus_sentinel(self):
        table = build_layout_table(QWERTY)
        assert len(table) == 33
        assert table[SENTINEL] == SENTINEL_KEY
        assert table['a'] == Key(0, Finger.PINKY, 1)
        assert table['j'] == Key(1, Finger.INDEX, 1)
        assert table[' '] == Key(0, Finger.THUMB, 3)

    def test_accepts_list_input(self):
        assert build_layout_table(list(QWERTY)) == build_layout_table(QWERTY)

    def test_duplicate_character_keeps_later_slot(self, caplog):
        layout = 'a' + QWERTY[1:]  # 'a' in slot 0 and slot 10
        table = build_layout_table(layout)
        assert table['a'] == SLOT_GEOMETRY[10]
        assert 'q' not in table
        assert len(table) == 32
        assert "Duplicate" in caplog.text

    def test_wrong_length_raises(self):
        with pytest.raises(LayoutError, match="32 characters"):
            build_layout_table(QWERTY[:30])

    def test_sentinel_in_layout_raises(self):
        with pytest.raises(LayoutError):
            build_layout_table(SENTINEL + QWERTY[1:])


class TestValidation:

    def test_clean_layout(self):
        assert validate_layout_letters(QWERTY) == []

    def test_reports_length_and_duplicates(self):
        issues = validate_layout_letters("aa")
        assert any("32 characters" in issue for issue in issues)
        assert any("Duplicate" in issue for issue in issues)

    def test_find_duplicate_letters(self):
        assert find_duplicate_letters("abcabd") == ['a', 'b']
        assert find_duplicate_letters(QWERTY) == []


class TestLookup:

    def test_lookup_known(self, qwerty_table):
        assert lookup_key(qwerty_table, 'f') == Key(0, Finger.INDEX, 1)

    def test_lookup_unmapped(self, qwerty_table):
        with pytest.raises(UnmappedCharacterError) as excinfo:
            lookup_key(qwerty_table, '!', position=7)
        assert excinfo.value.char == '!'
        assert excinfo.value.position == 7
        assert "Unmapped character '!'" in str(excinfo.value)

    def test_sentinel_is_not_a_corpus_character(self, qwerty_table):
        with pytest.raises(UnmappedCharacterError):
            lookup_key(qwerty_table, SENTINEL, position=0)

    def test_unmapped_is_a_key_error(self, qwerty_table):
        with pytest.raises(KeyError):
            lookup_key(qwerty_table, '?')


class TestKeyHelpers:

    def test_sentinel_never_matches_a_hand(self, qwerty_table):
        for char in QWERTY:
            assert not is_same_hand(SENTINEL_KEY, qwerty_table[char])

    def test_same_hand(self, qwerty_table):
        assert is_same_hand(qwerty_table['a'], qwerty_table['f'])
        assert not is_same_hand(qwerty_table['a'], qwerty_table['j'])

    def test_thumb_flag(self, qwerty_table):
        assert qwerty_table[' '].is_thumb
        assert not qwerty_table['a'].is_thumb

    def test_format_layout_rows(self):
        lines = format_layout_rows(QWERTY).split('\n')
        assert lines[0] == "q w e r t  y u i o p"
        assert lines[2] == "z x c v b  n m , . /"
        assert len(lines) == 4
