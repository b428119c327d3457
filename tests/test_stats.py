#!/usr/bin/env python3
# tests/test_stats.py - Unit tests for stats.py

import pytest

from layout_stats.bigram_stats import BigramResult, SkipgramResult
from layout_stats.stats import (
    CATEGORY_TOKENS, DEFAULT_WEIGHTS, DEFAULT_WEIGHT_VALUES, Stats, make_weights, validate_category,
)
from layout_stats.trigram_stats import TrigramResult


class TestValidateCategory:

    @pytest.mark.parametrize("token", CATEGORY_TOKENS)
    def test_known_tokens(self, token):
        assert validate_category(token) == token

    @pytest.mark.parametrize("token", [None, ''])
    def test_no_selection(self, token):
        assert validate_category(token) == ''

    def test_unknown_token(self):
        with pytest.raises(ValueError, match="Unknown category 'sfx'"):
            validate_category('sfx')


class TestStatsUpdates:

    def test_add_bigram(self):
        stats = Stats()
        stats.add_bigram(BigramResult('sfb', fspeed=90, weight=90))
        stats.add_bigram(BigramResult())
        assert stats.bigrams == 2
        assert stats.sfb == 1
        assert stats.fspeed == 90

    def test_add_skipgram_counts_every_check(self):
        stats = Stats()
        stats.add_skipgram(SkipgramResult(('sfs', 'lss'), fspeed=18, checks=2))
        assert stats.skipgrams == 2
        assert stats.sfs == 1
        assert stats.lss == 1
        assert stats.fspeed == 18

    def test_add_trigram(self):
        stats = Stats()
        stats.add_trigram(TrigramResult('red', thumb=True))
        stats.add_trigram(TrigramResult())
        assert stats.trigrams == 2
        assert stats.red == 1
        assert stats.thumb_stat == 1

    def test_tables(self):
        stats = Stats()
        stats.record_ngram('f', 'r', ' ')
        stats.record_ngram('f', 'r', ' ')
        stats.record_bad_bigram('f', 'r', 90)
        stats.record_bad_bigram('f', 'r', 90)
        assert stats.ngram_table == {('f', 'r', ' '): 2}
        assert stats.bad_bigrams == {('f', 'r'): 180}

    def test_fresh_records_do_not_share_tables(self):
        first, second = Stats(), Stats()
        first.record_ngram('a', 'b', 'c')
        assert not second.ngram_table

    def test_counters_exclude_tables(self):
        counters = Stats(sfb=3).counters()
        assert counters['sfb'] == 3
        assert counters['score'] == 0.0
        assert 'ngram_table' not in counters
        assert 'char_freq' not in counters


class TestWeights:

    def test_defaults(self):
        assert DEFAULT_WEIGHTS.column_pen == -10000
        assert DEFAULT_WEIGHTS.weak_red == -2000
        assert DEFAULT_WEIGHTS.inthreeroll == 320
        assert DEFAULT_WEIGHTS.sfb == 0
        assert DEFAULT_WEIGHTS.chars == 0

    def test_overrides(self):
        weights = make_weights({'fsb': -600})
        assert weights.fsb == -600
        assert weights.hsb == DEFAULT_WEIGHT_VALUES['hsb']

    def test_unknown_weight(self):
        with pytest.raises(ValueError, match="Unknown weight 'chars'"):
            make_weights({'chars': 1})

    def test_defaults_are_read_only(self):
        with pytest.raises(TypeError):
            DEFAULT_WEIGHT_VALUES['fsb'] = 1
