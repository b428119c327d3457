# layout_stats/__init__.py
"""
Corpus-based Keyboard Layout Statistics

Replays a text corpus over a 32-key layout, counts biomechanical n-gram
categories and reduces them to a single comparable score.
"""

__version__ = "1.0.0"

from .analyzer import analyze, score
from .base_scorer import BaseLayoutScorer, ScoreResult
from .config_loader import ConfigLoader, ScoringOptions, load_scorer_config
from .layout_utils import (
    Finger, Key, LayoutError, LayoutGeometryError, UnmappedCharacterError, build_layout_table,
)
from .stats import DEFAULT_WEIGHTS, Stats, make_weights

__all__ = [
    'analyze',
    'score',
    'BaseLayoutScorer',
    'ScoreResult',
    'ConfigLoader',
    'ScoringOptions',
    'load_scorer_config',
    'Finger',
    'Key',
    'LayoutError',
    'LayoutGeometryError',
    'UnmappedCharacterError',
    'build_layout_table',
    'DEFAULT_WEIGHTS',
    'Stats',
    'make_weights',
]
