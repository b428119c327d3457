#!/usr/bin/env python3
"""
Corpus Layout Scorer for scoring 32-key layouts.

Replays a text corpus over a layout and classifies every keystroke pair and
triple into ergonomic categories:

  - **Bigrams**: same-finger bigrams and repeats, lateral stretches, half and full scissors
  - **Skipgrams**: the same categories one keystroke apart
  - **Trigrams**: rolls (in/out, two- and three-key), alternation, redirects
  - **Heatmap**: per-slot usage cost weighted by character frequency
  - **Column penalty**: keystrokes beyond each finger's allowed share

The counters are combined into one weighted score (higher is better).

Layouts are 32 characters in slot order: top, home and bottom rows of ten
keys each (left pinky to right pinky), then the left and right thumb keys.

Usage:

  # Basic usage
  python corpus_scorer.py --layout "qwertyuiopasdfghjkl;zxcvbnm,./ -" --text-file corpus.txt

  # Record and report same-finger skipgrams
  python corpus_scorer.py --layout "qwertyuiopasdfghjkl;zxcvbnm,./ -" --text-file corpus.txt --category sfs

  # Magic key rules (t + magic key types "th")
  python corpus_scorer.py --layout "qwertyuiopasdfghjkl;zxcvbnm,./ *" --text-file corpus.txt --magic-rule th

  # CSV output
  python corpus_scorer.py --layout "qwertyuiopasdfghjkl;zxcvbnm,./ -" --text "hello world" --csv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from layout_stats.analyzer import analyze
from layout_stats.base_scorer import BaseLayoutScorer, ScoreResult
from layout_stats.cli_utils import create_standard_parser, handle_common_errors, setup_logging
from layout_stats.config_loader import (
    build_magic_rules, build_scoring_options, build_weights, load_scorer_config,
)
from layout_stats.output_utils import column_usage_frame, ngram_report, print_results, save_results_to_file
from layout_stats.stats import validate_category
from layout_stats.text_utils import FILLER, find_unmapped_characters, load_corpus

logger = logging.getLogger(__name__)

SCORER_NAME = 'corpus_scorer'
DEFAULT_TOP_NGRAMS = 10


class CorpusScorer(BaseLayoutScorer):
    """
    Corpus replay scorer.

    Configuration keys used:
        text: corpus text to replay
        category: n-gram category to record for the report
        magic_rules: digraph rules (None disables rewriting)
        scoring_options: thumb crediting, bad-bigram tracking, anchor rule
        weights: overrides of the default weight vector
        top_ngrams: number of recorded n-grams to report
    """

    def __init__(self, layout_letters: str, config: Optional[Dict[str, Any]] = None):
        super().__init__(layout_letters, config)

        self.category = validate_category(self.config.get('category'))
        self.options = build_scoring_options(self.config)
        self.weights = build_weights(self.config)
        self.magic_rules = build_magic_rules(self.config)
        top_ngrams = self.config.get('top_ngrams')
        self.top_ngrams = DEFAULT_TOP_NGRAMS if top_ngrams is None else int(top_ngrams)
        if self.top_ngrams < 0:
            raise ValueError(f"top_ngrams must be zero or more, got {self.top_ngrams}")

    def calculate_scores(self) -> ScoreResult:
        """
        Analyze the configured text and wrap the Stats in a ScoreResult.

        Raises:
            UnmappedCharacterError: If the text contains characters not on the layout
        """
        text = self.config.get('text', '')

        stats = analyze(text, self.layout_letters,
                        category=self.category,
                        magic_rules=self.magic_rules,
                        options=self.options,
                        weights=self.weights)

        breakdown: Dict[str, Any] = {
            'column_usage': column_usage_frame(stats, self.layout_letters),
        }
        if self.category:
            breakdown[f'top_{self.category}_ngrams'] = ngram_report(stats.ngram_table, self.top_ngrams)
        if self.options.track_bad_bigrams:
            bad = {(first, second, ''): weight for (first, second), weight in stats.bad_bigrams.items()}
            breakdown['worst_bigrams'] = ngram_report(bad, self.top_ngrams)

        components = stats.counters()
        components.pop('score')

        return ScoreResult(
            primary_score=stats.score,
            components=components,
            metadata={
                'text_length': len(text),
                'category': self.category or 'none',
                'magic_rules': 'off' if self.magic_rules is None else len(self.magic_rules),
                'include_thumb_alt': self.options.include_thumb_alt,
                'include_thumb_roll': self.options.include_thumb_roll,
            },
            validation_info={
                'chars_scored': stats.chars,
                'distinct_chars': len(stats.char_freq),
            },
            detailed_breakdown=breakdown,
        )


def _requested_config_path(argv) -> str:
    # --config has to be known before the full parser reads its help text
    pre_parser = argparse.ArgumentParser(add_help=False)
    pre_parser.add_argument('--config', default="config.yaml")
    known_args, _ = pre_parser.parse_known_args(argv)
    return known_args.config


def _load_config(config_path: str) -> Dict[str, Any]:
    if not Path(config_path).exists():
        logger.warning(f"Configuration file {config_path} not found; using built-in defaults")
        return {}
    return load_scorer_config(SCORER_NAME, config_path)


@handle_common_errors
def main(argv=None) -> int:
    """Main entry point."""
    cli_parser = create_standard_parser(SCORER_NAME, _requested_config_path(argv))
    args = cli_parser.parse_args(argv)

    setup_logging(quiet=args.quiet, verbose=args.verbose)

    config = _load_config(args.config)

    if args.text_file:
        text = load_corpus(args.text_file)
    else:
        text = args.text
    config['text'] = text

    if args.category:
        config['category'] = args.category
    if args.top_ngrams is not None:
        config['top_ngrams'] = args.top_ngrams

    if args.magic or args.magic_rule_map:
        config['magic_rules'] = {**(config.get('magic_rules') or {}), **args.magic_rule_map}

    scoring_options = dict(config.get('scoring_options') or {})
    for flag in ('include_thumb_alt', 'include_thumb_roll', 'track_bad_bigrams'):
        if getattr(args, flag):
            scoring_options[flag] = True
    config['scoring_options'] = scoring_options

    unmapped = find_unmapped_characters(text, args.layout)
    if unmapped:
        raise ValueError(f"Text contains characters not on the layout: {unmapped}")
    if FILLER in text and FILLER not in args.layout:
        logger.warning(f"Text contains '{FILLER}', which is skipped as a magic-key filler")

    scorer = CorpusScorer(args.layout, config)
    result = scorer.score_layout()

    output_config = (config.get('output_formats') or {}).get(args.output_format) or {}
    if args.output_file:
        save_results_to_file(result, args.output_file, args.output_format, output_config)
        logger.info(f"Results written to {args.output_file}")
    else:
        print_results(result, args.output_format, output_config)

    return 0


if __name__ == "__main__":
    sys.exit(main())
