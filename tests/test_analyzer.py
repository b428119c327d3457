#!/usr/bin/env python3
# tests/test_analyzer.py - Unit tests for analyzer.py (scanner, reducer, scorer)

import pytest

from layout_stats.analyzer import (
    advances_epic, analyze, column_frequencies, column_penalty, reduce_heatmap, scan_corpus, score,
)
from layout_stats.config_loader import ScoringOptions
from layout_stats.layout_utils import (
    Finger, LayoutError, SENTINEL_KEY, SLOT_GEOMETRY, UnmappedCharacterError, build_layout_table,
)
from layout_stats.stats import Stats, make_weights
from tests.conftest import QWERTY

MAGIC_QWERTY = "qwertyuiopasdfghjkl;zxcvbnm,./ *"


class TestScenarios:
    """End-to-end behaviour of analyze()"""

    def test_repeat_on_left_pinky(self):
        stats = analyze("aa", QWERTY, category='sfr')
        assert stats.sfr == 1
        assert stats.sfb == 0
        assert stats.fspeed == 132
        assert stats.ngram_table == {('a', 'a', ' '): 1}

    def test_repeat_score(self):
        stats = analyze("aa", QWERTY)
        assert stats.heatmap == 6
        assert stats.column_pen == 1
        # -3771 (travel) - 30 (heatmap) - 10000 (column)
        assert stats.score == -13801.0

    def test_empty_corpus(self):
        stats = analyze("", QWERTY)
        assert stats == Stats()
        assert stats.score == 0.0

    def test_analysis_is_repeatable(self):
        corpus = "the quick brown fox jumps over the lazy dog"
        first = analyze(corpus, QWERTY, category='sfb', magic_rules={'t': 'h'})
        second = analyze(corpus, QWERTY, category='sfb', magic_rules={'t': 'h'})
        assert first == second

    def test_sentinel_character_in_corpus_aborts(self):
        with pytest.raises(UnmappedCharacterError) as excinfo:
            analyze("a\0a", QWERTY)
        assert excinfo.value.position == 1

    def test_unmapped_character_aborts(self):
        with pytest.raises(UnmappedCharacterError) as excinfo:
            analyze("abc!", QWERTY)
        assert excinfo.value.position == 3

    def test_wrong_layout_size(self):
        with pytest.raises(LayoutError):
            analyze("abc", QWERTY[:31])

    def test_unknown_category(self):
        with pytest.raises(ValueError, match="Unknown category"):
            analyze("abc", QWERTY, category='bogus')

    def test_duplicate_layout_character_uses_later_slot(self):
        layout = 'a' + QWERTY[1:]
        stats = analyze("aa", layout)
        # both slots holding 'a' contribute to the heatmap
        assert stats.heatmap == (12 + 3) * 2
        assert stats.fspeed == 132


class TestScanner:

    def test_counts_bigrams_and_skipgrams(self):
        stats = analyze("fkr", QWERTY, category='sfs')
        assert stats.chars == 3
        assert stats.bigrams == 3
        assert stats.skipgrams == 3
        assert stats.trigrams == 3
        assert stats.sfs == 1
        assert stats.fspeed == 18
        assert stats.ngram_table == {('f', '_', 'r'): 1}

    def test_trigram_recording(self):
        stats = analyze("asd", QWERTY, category='inthreeroll')
        assert stats.inthreeroll == 1
        assert stats.ngram_table == {('a', 's', 'd'): 1}

    def test_char_freq(self):
        stats = analyze("abba", QWERTY)
        assert stats.char_freq == {'a': 2, 'b': 2}

    def test_thumb_characters_excluded_by_default(self):
        stats = analyze("a a", QWERTY)
        assert stats.thumb_stat == 1
        assert stats.chars == 2

    def test_thumb_characters_kept_when_credited(self):
        stats = analyze("a a", QWERTY, options=ScoringOptions(include_thumb_alt=True))
        assert stats.thumb_stat == 1
        assert stats.chars == 3

    def test_bad_bigram_tracking(self):
        stats = analyze("frfr", QWERTY, options=ScoringOptions(track_bad_bigrams=True))
        assert stats.bad_bigrams == {('f', 'r'): 180, ('r', 'f'): 90}
        assert analyze("frfr", QWERTY).bad_bigrams == {}

    def test_scan_corpus_directly(self):
        table = build_layout_table(QWERTY)
        stats = scan_corpus("fr", table)
        assert stats.sfb == 1
        assert stats.heatmap == 0


class TestMagicRules:

    def test_repeat_key_collapses_double_letters(self):
        assert analyze("hello", QWERTY).sfr == 1
        stats = analyze("hello", QWERTY, magic_rules={})
        assert stats.sfr == 0
        assert stats.chars == 4

    def test_chars_exclude_fillers(self):
        corpus = "that thing"
        stats = analyze(corpus, QWERTY, magic_rules={'t': 'h'},
                        options=ScoringOptions(include_thumb_alt=True))
        # two "th" digraphs collapse to t + filler
        assert stats.chars == len(corpus) - 2
        assert 'h' not in stats.char_freq

    def test_filler_on_layout_is_a_real_key(self):
        stats = analyze("the", MAGIC_QWERTY, magic_rules={'t': 'h'},
                        options=ScoringOptions(include_thumb_roll=True))
        assert stats.char_freq['*'] == 1
        assert stats.chars == 3
        assert stats.thumb_stat == 1


class TestEpicAnchor:
    """Opposite-hand anchor used by the second skipgram check"""

    def test_literal_rule_never_advances(self):
        for epic_key in SLOT_GEOMETRY + (SENTINEL_KEY,):
            for key in SLOT_GEOMETRY:
                assert not advances_epic(epic_key, key)

    def test_hand_inequality_rule(self):
        left, right = SLOT_GEOMETRY[10], SLOT_GEOMETRY[19]
        assert advances_epic(left, right, hand_inequality=True)
        assert not advances_epic(left, SLOT_GEOMETRY[11], hand_inequality=True)
        assert advances_epic(SENTINEL_KEY, left, hand_inequality=True)

    def test_literal_rule_skips_epic_skipgrams(self):
        stats = analyze("jfdsr", QWERTY)
        assert stats.sfs == 0
        assert stats.skipgrams == 5

    def test_hand_inequality_catches_run_spanning_skipgram(self):
        stats = analyze("jfdsr", QWERTY, options=ScoringOptions(epic_hand_inequality=True))
        # anchor 'f' starts the left-hand run and shares a finger with 'r'
        assert stats.sfs == 1
        assert stats.skipgrams == 5 + 3

    def test_anchor_pair_counts_each_matching_category(self):
        stats = analyze("jfdg", QWERTY, options=ScoringOptions(epic_hand_inequality=True))
        # f then g is both a same-finger and a lateral skipgram across the anchor
        assert stats.sfs == 2
        assert stats.lss == 1


class TestReducer:

    def test_heatmap(self):
        stats = analyze("qp", QWERTY)
        assert stats.heatmap == 24

    def test_column_frequencies_group_by_finger_and_hand(self):
        table = build_layout_table(QWERTY)
        columns = column_frequencies(QWERTY, table, {'f': 2, 'g': 1, 'j': 4})
        assert columns == {(Finger.INDEX, 0): 3, (Finger.INDEX, 1): 4}

    def test_column_penalty(self):
        assert column_penalty(Finger.PINKY, 10, 100) == 3
        assert column_penalty(Finger.INDEX, 10, 100) == 0
        assert column_penalty(Finger.THUMB, 30, 100) == 5

    def test_column_penalty_at_exact_share(self):
        corpus = ("a" * 10 + "s" * 12 + "d" * 13 + "f" * 13 + "j" * 13
                  + "k" * 13 + "l" * 12 + ";" * 7 + " " * 7)
        stats = analyze(corpus, QWERTY, options=ScoringOptions(include_thumb_alt=True))
        assert stats.chars == 100
        # only the left pinky is over its 7% share
        assert stats.column_pen == 3

    def test_reduce_heatmap_updates_in_place(self):
        table = build_layout_table(QWERTY)
        stats = scan_corpus("aaaa", table)
        assert reduce_heatmap(stats, QWERTY, table) is stats
        assert stats.heatmap == 12
        assert stats.column_pen == 3


class TestScore:

    def test_truncates_toward_zero(self):
        stats = Stats(fspeed=1, heatmap=1)
        # -200/7 and -500/100 truncate to -28 and -5
        assert score(stats) == -33.0

    def test_weighted_fields(self):
        stats = Stats(lsb=2, hsb=1, hss=1, fsb=1, inroll=3, inthreeroll=1, red=1, weak_red=1)
        expected = 2 * -200 + -100 + -20 + -500 + 3 * 100 + 320 + -300 + -2000
        assert score(stats) == float(expected)

    def test_custom_weights(self):
        stats = Stats(lsb=2, alt=5)
        weights = make_weights({'lsb': -1, 'alt': 10})
        assert score(stats, weights) == 48.0

    def test_analyze_uses_custom_weights(self):
        weights = make_weights({'column_pen': 0, 'heatmap': 0, 'fspeed': 0})
        assert analyze("aa", QWERTY, weights=weights).score == 0.0
