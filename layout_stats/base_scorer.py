#!/usr/bin/env python3
"""
Base classes for layout scorers.

Provides the common result container and the scorer interface.
"""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from layout_stats.layout_utils import validate_layout_letters

logger = logging.getLogger(__name__)


@dataclass
class ScoreResult:
    """
    Standardized result container for layout scoring.
    """

    primary_score: float
    """Main score for this layout (higher = better)"""

    components: Dict[str, float] = field(default_factory=dict)
    """Individual counters and sub-scores (e.g., sfb, heatmap, column_pen)"""

    scorer_name: str = ""
    """Name of the scoring method used"""

    layout_letters: str = ""
    """Layout characters in canonical slot order"""

    metadata: Dict[str, Any] = field(default_factory=dict)
    """Additional scorer-specific metadata"""

    detailed_breakdown: Dict[str, Any] = field(default_factory=dict)
    """Detailed analysis breakdown (for detailed output mode)"""

    validation_info: Dict[str, Any] = field(default_factory=dict)
    """Validation and coverage information"""

    execution_time: float = 0.0
    """Time taken to calculate scores (seconds)"""

    config_used: Dict[str, Any] = field(default_factory=dict)
    """Configuration settings used for this scoring"""

    def get_score(self, component_name: Optional[str] = None) -> float:
        """
        Get a specific score component or the primary score.

        Args:
            component_name: Name of component score to retrieve, or None for primary

        Returns:
            Requested score value

        Raises:
            KeyError: If component_name not found in components
        """
        if component_name is None:
            return self.primary_score

        if component_name not in self.components:
            available = list(self.components.keys())
            raise KeyError(f"Component '{component_name}' not found. Available: {available}")

        return self.components[component_name]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert result to a flat dictionary suitable for CSV export.
        """
        result = {
            'primary_score': self.primary_score,
            'scorer_name': self.scorer_name,
            'layout': self.layout_letters,
            'execution_time': self.execution_time,
        }

        for component, score in self.components.items():
            result[f'component_{component}'] = score

        for key, value in self.metadata.items():
            if isinstance(value, (str, int, float, bool)):
                result[f'meta_{key}'] = value

        for key, value in self.validation_info.items():
            if isinstance(value, (str, int, float, bool)):
                result[f'validation_{key}'] = value

        return result

    def summary(self) -> str:
        """Brief human-readable summary."""
        summary_lines = [
            f"Scorer: {self.scorer_name}",
            f"Primary score: {self.primary_score:.6f}",
        ]

        if self.components:
            summary_lines.append("Components:")
            for name, score in self.components.items():
                summary_lines.append(f"  {name}: {score:.6f}")

        if self.execution_time > 0:
            summary_lines.append(f"Execution time: {self.execution_time:.3f}s")

        return "\n".join(summary_lines)


class BaseLayoutScorer(ABC):
    """
    Abstract base class for layout scoring methods.

    Handles layout validation, timing and result metadata; subclasses
    implement calculate_scores().
    """

    def __init__(self, layout_letters: str, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the base scorer.

        Args:
            layout_letters: 32 characters in canonical slot order
            config: Optional configuration dictionary (loaded from YAML if None)
        """
        self.layout_letters = layout_letters
        self.config = config or {}
        self.scorer_name = self.__class__.__name__.lower().replace('scorer', '_scorer')

        self._validate_layout()

    def _validate_layout(self) -> None:
        """
        Validate the layout for basic correctness.

        Duplicate characters are only reported; the later slot wins.

        Raises:
            ValueError: If the layout is empty or has the wrong length
        """
        if not self.layout_letters:
            raise ValueError("Layout cannot be empty")

        issues = validate_layout_letters(self.layout_letters)
        fatal = [issue for issue in issues if not issue.startswith("Duplicate")]
        if fatal:
            raise ValueError("; ".join(fatal))

        for issue in issues:
            logger.warning(issue)

    @abstractmethod
    def calculate_scores(self) -> ScoreResult:
        """
        Calculate layout scores using the scorer's methodology.

        Returns:
            ScoreResult containing primary score, components, and metadata
        """

    def score_layout(self) -> ScoreResult:
        """
        Main entry point for scoring a layout.

        Returns:
            ScoreResult with timing information
        """
        start_time = time.time()

        result = self.calculate_scores()

        result.execution_time = time.time() - start_time
        result.scorer_name = self.scorer_name
        result.layout_letters = self.layout_letters
        result.config_used = {k: v for k, v in self.config.items() if k != 'text'}

        return result
