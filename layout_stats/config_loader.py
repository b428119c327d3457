#!/usr/bin/env python3
"""
Configuration loader for corpus-based layout analysis.

Loads YAML configuration files and merges the `common` section into each
scorer section. Also turns the raw scorer settings into the typed options
used by the analyzer.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from layout_stats.stats import Stats, make_weights, validate_category

logger = logging.getLogger(__name__)

NON_SCORER_SECTIONS = {'common', 'output_formats', 'cli'}


@dataclass(frozen=True)
class ScoringOptions:
    """Switches that change how events are counted."""

    include_thumb_alt: bool = False
    """Credit alternation for triples typed partly with a thumb"""

    include_thumb_roll: bool = False
    """Credit rolls and redirects for triples typed partly with a thumb"""

    track_bad_bigrams: bool = False
    """Accumulate per-bigram weights in Stats.bad_bigrams"""

    epic_hand_inequality: bool = False
    """Advance the opposite-hand anchor on plain hand inequality"""

    @property
    def exclude_thumb_chars(self) -> bool:
        return not (self.include_thumb_alt or self.include_thumb_roll)

    @classmethod
    def from_config(cls, options: Optional[Mapping[str, Any]]) -> 'ScoringOptions':
        """
        Build options from a `scoring_options` mapping.

        Raises:
            ValueError: If the mapping contains unknown option names or
                values that are not booleans
        """
        options = dict(options or {})
        known = set(cls.__dataclass_fields__)
        unknown = sorted(set(options) - known)
        if unknown:
            raise ValueError(f"Unknown scoring options {unknown}. Available: {sorted(known)}")
        not_bool = sorted(name for name, value in options.items()
                          if value is not None and not isinstance(value, bool))
        if not_bool:
            raise ValueError(f"Scoring options {not_bool} must be true or false")
        return cls(**{name: value for name, value in options.items() if value is not None})


class ConfigLoader:
    """Handles loading and processing of YAML configuration files."""

    def __init__(self, config_path: str = "config.yaml"):
        """
        Initialize configuration loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        self._config_cache: Optional[Dict[str, Any]] = None

    def load_config(self) -> Dict[str, Any]:
        """
        Load YAML configuration file.

        Returns:
            Full configuration dictionary

        Raises:
            FileNotFoundError: If configuration file doesn't exist
            yaml.YAMLError: If YAML parsing fails
        """
        if self._config_cache is not None:
            return self._config_cache

        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML configuration: {e}")

        if config is None:
            config = {}

        logger.debug(f"Loaded configuration from {self.config_path}")
        self._config_cache = config
        return config

    def get_scorer_config(self, scorer_name: str) -> Dict[str, Any]:
        """
        Get configuration for a specific scorer with common settings merged.

        Args:
            scorer_name: Name of the scorer (e.g., 'corpus_scorer')

        Returns:
            Merged configuration dictionary for the scorer

        Raises:
            ValueError: If scorer not found in configuration
        """
        full_config = self.load_config()

        if scorer_name not in full_config:
            raise ValueError(
                f"Scorer '{scorer_name}' not found in configuration. "
                f"Available scorers: {self.get_available_scorers()}"
            )

        common_config = full_config.get('common') or {}
        scorer_config = dict(full_config[scorer_name] or {})

        # Scorer-specific settings take precedence
        merged_config = {**common_config, **scorer_config}
        merged_config['output_formats'] = full_config.get('output_formats') or {}

        return merged_config

    def get_output_format_config(self, format_name: str) -> Dict[str, Any]:
        """
        Get output format configuration.

        Args:
            format_name: Name of output format (csv, detailed, score_only)

        Returns:
            Output format configuration
        """
        output_formats = self.load_config().get('output_formats') or {}
        return output_formats.get(format_name) or {}

    def get_available_scorers(self) -> List[str]:
        """Get list of scorer section names found in the configuration."""
        return [k for k in self.load_config().keys() if k not in NON_SCORER_SECTIONS]

    def validate_scorer_config(self, scorer_name: str) -> List[str]:
        """
        Validate a scorer's configuration and return any issues found.

        Args:
            scorer_name: Name of the scorer to validate

        Returns:
            List of validation error messages (empty if valid)
        """
        try:
            config = self.get_scorer_config(scorer_name)
        except (ValueError, FileNotFoundError, yaml.YAMLError) as e:
            return [f"Configuration error: {e}"]

        issues = []

        for section in ('description', 'method'):
            if section not in config:
                issues.append(f"Missing required section: {section}")

        try:
            build_scoring_options(config)
        except ValueError as e:
            issues.append(str(e))

        try:
            build_weights(config)
        except (ValueError, TypeError) as e:
            issues.append(f"Invalid weights: {e}")

        try:
            validate_category(config.get('category'))
        except ValueError as e:
            issues.append(str(e))

        rules = config.get('magic_rules')
        if rules is not None:
            if not isinstance(rules, dict):
                issues.append("magic_rules must be a mapping of character to character")
            else:
                for char, paired in rules.items():
                    if len(str(char)) != 1 or len(str(paired)) != 1:
                        issues.append(f"Magic rule {char!r} -> {paired!r} must map one character to one character")

        return issues


def build_scoring_options(config: Mapping[str, Any]) -> ScoringOptions:
    """Read `scoring_options` from a scorer configuration."""
    return ScoringOptions.from_config(config.get('scoring_options'))


def build_weights(config: Mapping[str, Any]) -> Stats:
    """Read `weights` overrides from a scorer configuration."""
    return make_weights(config.get('weights') or {})


def build_magic_rules(config: Mapping[str, Any]) -> Optional[Dict[str, str]]:
    """
    Read `magic_rules` from a scorer configuration.

    Returns:
        Dict of rules, or None when the digraph preprocessor is disabled
    """
    rules = config.get('magic_rules')
    if rules is None:
        return None
    return {str(char): str(paired) for char, paired in rules.items()}


# Global configuration loader instance
_config_loader: Optional[ConfigLoader] = None


def get_config_loader(config_path: str = "config.yaml") -> ConfigLoader:
    """
    Get global configuration loader instance (singleton pattern).

    Args:
        config_path: Path to configuration file

    Returns:
        ConfigLoader instance
    """
    global _config_loader

    if _config_loader is None or _config_loader.config_path != Path(config_path):
        _config_loader = ConfigLoader(config_path)

    return _config_loader


def load_scorer_config(scorer_name: str, config_path: str = "config.yaml") -> Dict[str, Any]:
    """
    Convenience function to load configuration for a specific scorer.

    Args:
        scorer_name: Name of the scorer
        config_path: Path to configuration file

    Returns:
        Scorer configuration dictionary
    """
    return get_config_loader(config_path).get_scorer_config(scorer_name)
