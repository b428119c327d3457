#!/usr/bin/env python3
"""
CLI utilities for corpus-based layout analysis.

Argument parsing, logging setup and error handling shared by the scorer
scripts.
"""

import argparse
import functools
import logging
import sys
from typing import Dict, List, Optional

from layout_stats.config_loader import get_config_loader
from layout_stats.stats import CATEGORY_TOKENS

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'


class StandardCLIParser:
    """
    Command-line argument parser for a corpus scorer.

    Descriptions are read from the scorer's configuration section when the
    configuration file is available.
    """

    def __init__(self, scorer_name: str, config_path: str = "config.yaml"):
        """
        Initialize the CLI parser for a specific scorer.

        Args:
            scorer_name: Name of the scorer (e.g., 'corpus_scorer')
            config_path: Path to configuration file
        """
        self.scorer_name = scorer_name

        try:
            self.scorer_config = get_config_loader(config_path).get_scorer_config(scorer_name)
        except (FileNotFoundError, ValueError) as e:
            logger.debug(f"Could not load configuration for help text: {e}")
            self.scorer_config = {}

        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        description = self.scorer_config.get('description', f'{self.scorer_name} for keyboard layouts')
        method = self.scorer_config.get('method', 'Corpus replay over a 32-key layout')

        parser = argparse.ArgumentParser(
            description=f"{description}\n\nMethod: {method}",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog=self._generate_epilog(),
        )

        self._add_layout_arguments(parser)
        self._add_input_output_arguments(parser)
        self._add_scoring_arguments(parser)

        return parser

    def _add_layout_arguments(self, parser: argparse.ArgumentParser) -> None:
        layout_group = parser.add_argument_group('Layout Definition')
        layout_group.add_argument(
            '--layout', '--layout-letters',
            dest='layout',
            required=True,
            help="32 characters in slot order: 3 rows of 10 (left to right), then left and right thumb"
        )

    def _add_input_output_arguments(self, parser: argparse.ArgumentParser) -> None:
        input_group = parser.add_argument_group('Input Options')
        text_source = input_group.add_mutually_exclusive_group(required=True)
        text_source.add_argument(
            '--text',
            dest='text',
            help="Text to analyze (alternative to --text-file)"
        )
        text_source.add_argument(
            '--text-file',
            dest='text_file',
            help="Path to text file to analyze (alternative to --text)"
        )
        input_group.add_argument(
            '--config',
            dest='config',
            default="config.yaml",
            help="Path to configuration file (default: config.yaml)"
        )

        output_group = parser.add_argument_group('Output Options')
        output_group.add_argument(
            '--output-format',
            dest='output_format',
            choices=['detailed', 'csv', 'score_only'],
            default='detailed',
            help="Output format (default: detailed)"
        )
        output_group.add_argument('--csv', dest='csv', action='store_true',
                                  help="Output in CSV format (same as --output-format csv)")
        output_group.add_argument('--score-only', dest='score_only', action='store_true',
                                  help="Output only the score (same as --output-format score_only)")
        output_group.add_argument('--output-file', dest='output_file',
                                  help="Write results to this file instead of stdout")
        output_group.add_argument('--top-ngrams', dest='top_ngrams', type=int,
                                  help="Number of recorded n-grams to report")
        output_group.add_argument('--quiet', dest='quiet', action='store_true',
                                  help="Only log warnings and errors")
        output_group.add_argument('--verbose', dest='verbose', action='store_true',
                                  help="Log debug messages")

    def _add_scoring_arguments(self, parser: argparse.ArgumentParser) -> None:
        scoring_group = parser.add_argument_group('Scoring Options')
        scoring_group.add_argument(
            '--category', '--command',
            dest='category',
            choices=list(CATEGORY_TOKENS),
            help="Record n-grams of this category for the report"
        )
        scoring_group.add_argument(
            '--magic-rule',
            dest='magic_rules',
            action='append',
            metavar='XY',
            help="Magic rule: key X also types XY as one keystroke (repeatable)"
        )
        scoring_group.add_argument(
            '--magic',
            dest='magic',
            action='store_true',
            help="Enable magic-key rewriting even without explicit rules (repeat key)"
        )
        scoring_group.add_argument('--include-thumb-alt', dest='include_thumb_alt',
                                   action='store_true',
                                   help="Credit alternation for trigrams typed with a thumb")
        scoring_group.add_argument('--include-thumb-roll', dest='include_thumb_roll',
                                   action='store_true',
                                   help="Credit rolls and redirects for trigrams typed with a thumb")
        scoring_group.add_argument('--track-bad-bigrams', dest='track_bad_bigrams',
                                   action='store_true',
                                   help="Report weighted bad bigrams")

    def _generate_epilog(self) -> str:
        qwerty = "qwertyuiopasdfghjkl;zxcvbnm,./ -"
        basic_cmd = f"python {self.scorer_name}.py --layout '{qwerty}'"
        lines = [
            "Examples:",
            "  # Score a text file",
            f"  {basic_cmd} --text-file corpus.txt",
            "",
            "  # Report the most common same-finger bigrams",
            f"  {basic_cmd} --text-file corpus.txt --category sfb --top-ngrams 20",
            "",
            "  # Magic key that types 'th' after 't'",
            f"  {basic_cmd} --text-file corpus.txt --magic-rule th",
        ]
        return "\n".join(lines)

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments with validation.

        Args:
            args: List of arguments (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        parsed_args = self.parser.parse_args(args)

        if parsed_args.csv:
            parsed_args.output_format = 'csv'
        elif parsed_args.score_only:
            parsed_args.output_format = 'score_only'

        try:
            parsed_args.magic_rule_map = parse_magic_rules(parsed_args.magic_rules)
        except ValueError as e:
            self.parser.error(str(e))

        return parsed_args


def parse_magic_rules(rules: Optional[List[str]]) -> Dict[str, str]:
    """
    Turn ['th', 'ea'] into {'t': 'h', 'e': 'a'}.

    Raises:
        ValueError: If a rule is not exactly two characters
    """
    parsed = {}
    for rule in rules or []:
        if len(rule) != 2:
            raise ValueError(f"Magic rule must be two characters, got {rule!r}")
        parsed[rule[0]] = rule[1]
    return parsed


def create_standard_parser(scorer_name: str,
                           config_path: str = "config.yaml") -> StandardCLIParser:
    """Create a CLI parser for a scorer."""
    return StandardCLIParser(scorer_name, config_path)


def setup_logging(quiet: bool = False, verbose: bool = False) -> None:
    """Configure root logging for a command-line run."""
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)


def handle_common_errors(func):
    """
    Decorator to handle common CLI errors gracefully.

    Args:
        func: Function to wrap (typically main())

    Returns:
        Wrapped function returning a process exit code
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except KeyboardInterrupt:
            print("\nOperation cancelled by user.", file=sys.stderr)
            return 130
        except FileNotFoundError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except (ValueError, KeyError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
        except PermissionError as e:
            print(f"Permission error: {e}", file=sys.stderr)
            return 1

    return wrapper
