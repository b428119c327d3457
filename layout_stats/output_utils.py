#!/usr/bin/env python3
"""
Output utilities for corpus-based layout analysis.

Formatting of ScoreResult objects (detailed, csv, score_only) and pandas
reports for the n-gram table and column usage.
"""

import sys
from typing import Any, Dict, List, Mapping, Optional, Sequence

import pandas as pd

from layout_stats.analyzer import MAX_FINGER_FREQUENCY, column_frequencies, column_penalty
from layout_stats.base_scorer import ScoreResult
from layout_stats.layout_utils import build_layout_table, format_layout_rows
from layout_stats.stats import Stats

HAND_NAMES = {0: 'left', 1: 'right'}


def ngram_report(ngram_table: Mapping, top_n: int = 10) -> pd.DataFrame:
    """
    Most frequent recorded n-grams.

    Args:
        ngram_table: Stats.ngram_table (3-character tuple -> count)
        top_n: Number of rows to keep

    Returns:
        DataFrame with columns ngram, count, share (share of all recorded n-grams)
    """
    if not ngram_table:
        return pd.DataFrame(columns=['ngram', 'count', 'share'])

    df = pd.DataFrame(
        [(''.join(key), count) for key, count in ngram_table.items()],
        columns=['ngram', 'count'],
    )
    df['share'] = df['count'] / df['count'].sum()
    df = df.sort_values(['count', 'ngram'], ascending=[False, True], kind='mergesort')
    return df.head(top_n).reset_index(drop=True)


def column_usage_frame(stats: Stats, layout_letters: Sequence[str]) -> pd.DataFrame:
    """
    Keystrokes per (hand, finger) column with allowed share and penalty.

    Args:
        stats: Analyzed Stats (char_freq and chars filled in)
        layout_letters: 32 characters in canonical slot order

    Returns:
        DataFrame sorted by hand then finger
    """
    table = build_layout_table(layout_letters)
    columns = column_frequencies(layout_letters, table, stats.char_freq)

    rows = []
    for (finger, hand), freq in columns.items():
        rows.append({
            'hand': HAND_NAMES.get(hand, str(hand)),
            'finger': finger.name.lower(),
            'frequency': freq,
            'share': freq / stats.chars if stats.chars else 0.0,
            'allowed': MAX_FINGER_FREQUENCY[finger] / 100.0,
            'penalty': column_penalty(finger, freq, stats.chars),
            '_order': (hand, int(finger)),
        })

    if not rows:
        return pd.DataFrame(columns=['hand', 'finger', 'frequency', 'share', 'allowed', 'penalty'])

    df = pd.DataFrame(rows).sort_values('_order').drop(columns='_order')
    return df.reset_index(drop=True)


def format_csv_output(result: ScoreResult,
                      config: Optional[Dict[str, Any]] = None,
                      include_metadata: bool = True) -> str:
    """
    Format scoring results as CSV output.

    Args:
        result: ScoreResult object to format
        config: Output format configuration
        include_metadata: Whether to include metadata fields

    Returns:
        CSV formatted string
    """
    if config is None:
        config = {}

    delimiter = config.get('delimiter', ',')
    precision = config.get('precision', 6)
    include_headers = config.get('include_headers', True)

    headers = ['primary_score']
    values = [f"{result.primary_score:.{precision}f}"]

    for component in sorted(result.components.keys()):
        headers.append(f'component_{component}')
        values.append(_format_value(result.components[component], precision))

    if include_metadata:
        headers.extend(['scorer_name', 'layout', 'execution_time'])
        values.extend([result.scorer_name, result.layout_letters, f"{result.execution_time:.3f}"])

        for key in sorted(result.metadata.keys()):
            value = result.metadata[key]
            if isinstance(value, (str, int, float, bool)):
                headers.append(f'meta_{key}')
                values.append(_format_value(value, precision))

    lines = []
    if include_headers:
        lines.append(delimiter.join(headers))
    lines.append(delimiter.join(values))
    return '\n'.join(lines)


def _format_value(value: Any, precision: int) -> str:
    if isinstance(value, float):
        return f"{value:.{precision}f}"
    return str(value)


def format_score_only_output(result: ScoreResult,
                             config: Optional[Dict[str, Any]] = None,
                             include_components: bool = False) -> str:
    """
    Format scoring results as score-only output (compact format).

    Args:
        result: ScoreResult object to format
        config: Output format configuration
        include_components: Whether to include component scores

    Returns:
        Space-separated scores string
    """
    if config is None:
        config = {}

    precision = config.get('precision', 6)
    separator = config.get('separator', ' ')

    scores = [f"{result.primary_score:.{precision}f}"]

    if include_components:
        for component in sorted(result.components.keys()):
            scores.append(_format_value(result.components[component], precision))

    return separator.join(scores)


def format_detailed_output(result: ScoreResult,
                           config: Optional[Dict[str, Any]] = None) -> str:
    """
    Format scoring results as detailed human-readable output.

    Args:
        result: ScoreResult object to format
        config: Output format configuration

    Returns:
        Formatted detailed output string
    """
    if config is None:
        config = {}

    show_breakdown = config.get('show_breakdown', True)

    lines = [f"Score: {result.primary_score:,.1f}"]

    if result.layout_letters:
        lines.append("")
        lines.append("Layout:")
        for row in format_layout_rows(result.layout_letters).split('\n'):
            lines.append(f"  {row}")

    if result.components:
        lines.append("")
        lines.append("Counters:")
        for component, value in result.components.items():
            component_name = component.replace('_', ' ')
            if isinstance(value, float):
                lines.append(f"  {component_name:<16}: {value:12.4f}")
            else:
                lines.append(f"  {component_name:<16}: {value:12,}")

    if result.metadata:
        lines.append("")
        lines.append("Additional information:")
        for key, value in sorted(result.metadata.items()):
            if isinstance(value, (str, int, float, bool)):
                lines.append(f"  {key.replace('_', ' ').capitalize():<28}: {value}")

    if show_breakdown and result.detailed_breakdown:
        lines.append("")
        lines.append("Detailed breakdown:")
        _format_detailed_breakdown(result.detailed_breakdown, lines, indent="  ")

    return '\n'.join(lines)


def _format_detailed_breakdown(breakdown: Dict[str, Any],
                               lines: List[str],
                               indent: str = "") -> None:
    """
    Recursively format detailed breakdown information.

    Args:
        breakdown: Dictionary of breakdown information
        lines: List to append formatted lines to
        indent: Current indentation string
    """
    for key, value in breakdown.items():
        key_name = key.replace('_', ' ').title()

        if isinstance(value, pd.DataFrame):
            lines.append(f"{indent}{key_name}:")
            if value.empty:
                lines.append(f"{indent}  (none)")
            else:
                for text_line in value.to_string(index=False).split('\n'):
                    lines.append(f"{indent}  {text_line}")
        elif isinstance(value, dict):
            lines.append(f"{indent}{key_name}:")
            _format_detailed_breakdown(value, lines, indent + "  ")
        elif isinstance(value, float):
            lines.append(f"{indent}{key_name}: {value:.6f}")
        else:
            lines.append(f"{indent}{key_name}: {value}")


def render_results(result: ScoreResult,
                   output_format: str = "detailed",
                   config: Optional[Dict[str, Any]] = None) -> str:
    """
    Render results in the specified format.

    Raises:
        ValueError: If the output format is unknown
    """
    if output_format == "csv":
        return format_csv_output(result, config)
    if output_format == "score_only":
        return format_score_only_output(result, config)
    if output_format == "detailed":
        return format_detailed_output(result, config)
    raise ValueError(f"Unknown output format: {output_format}")


def print_results(result: ScoreResult,
                  output_format: str = "detailed",
                  config: Optional[Dict[str, Any]] = None,
                  file=None) -> None:
    """
    Print scoring results in the specified format.

    Args:
        result: ScoreResult object to print
        output_format: Format type ('detailed', 'csv', 'score_only')
        config: Output format configuration
        file: File object to write to (defaults to stdout)
    """
    if file is None:
        file = sys.stdout
    print(render_results(result, output_format, config), file=file)


def save_results_to_file(result: ScoreResult,
                         filepath: str,
                         output_format: str = "csv",
                         config: Optional[Dict[str, Any]] = None) -> None:
    """
    Save scoring results to a file.

    Args:
        result: ScoreResult object to save
        filepath: Path to output file
        output_format: Format type ('detailed', 'csv', 'score_only')
        config: Output format configuration
    """
    content = render_results(result, output_format, config)
    with open(filepath, 'w', encoding='utf-8') as f:
        f.write(content)
        f.write('\n')
