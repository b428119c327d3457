#!/usr/bin/env python3
"""
Text utilities for corpus-based layout analysis.

Corpus loading, digraph ("magic rule") rewriting, and coverage checks of a
corpus against a layout.
"""

import logging
from collections import Counter
from pathlib import Path
from typing import Dict, List, Mapping, Optional, Sequence, Tuple, Union

logger = logging.getLogger(__name__)

# Written after the first character of a collapsed digraph
FILLER = '*'


def build_magic_rule_list(layout_letters: Sequence[str],
                          magic_rules: Mapping[str, str]) -> List[Tuple[str, str]]:
    """
    Expand magic rules into an ordered substitution list.

    Each layout character yields one rule, in layout slot order. A character
    without an explicit rule pairs with itself, so its key doubles as a
    repeat key.

    Args:
        layout_letters: 32 characters in canonical slot order
        magic_rules: Mapping from layout character to its paired character

    Returns:
        List of (pattern, replacement) pairs, applied first to last
    """
    unknown = [char for char in magic_rules if char not in layout_letters]
    if unknown:
        logger.warning(f"Magic rules for characters not on the layout are ignored: {unknown}")

    rules = []
    for letter in layout_letters:
        paired = magic_rules.get(letter, letter)
        rules.append((letter + paired, letter + FILLER))
    return rules


def apply_magic_rules(corpus: str,
                      layout_letters: Sequence[str],
                      magic_rules: Mapping[str, str]) -> str:
    """
    Collapse digraphs typed with a single magic keystroke.

    Rules are applied one after another to the same text, so an earlier
    rule can change what a later rule matches.

    Args:
        corpus: Source text
        layout_letters: 32 characters in canonical slot order
        magic_rules: Mapping from layout character to its paired character

    Returns:
        Rewritten corpus
    """
    for pattern, replacement in build_magic_rule_list(layout_letters, magic_rules):
        corpus = corpus.replace(pattern, replacement)
    return corpus


def find_unmapped_characters(text: str, layout_letters: Sequence[str]) -> Dict[str, int]:
    """
    Count corpus characters that have no key on the layout.

    The filler marker is not reported since the scanner skips it.

    Args:
        text: Corpus text
        layout_letters: 32 characters in canonical slot order

    Returns:
        Dict mapping each unmapped character to its occurrence count
    """
    allowed = set(layout_letters) | {FILLER}
    counts = Counter(char for char in text if char not in allowed)
    return dict(counts.most_common())


def load_corpus(filepath: Union[str, Path], encoding: str = 'utf-8',
                max_chars: Optional[int] = None) -> str:
    """
    Read corpus text from a file.

    Args:
        filepath: Path to a plain-text corpus
        encoding: File encoding
        max_chars: Optional limit on the number of characters read

    Returns:
        Corpus text

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(filepath)
    if not path.is_file():
        raise FileNotFoundError(f"Corpus file not found: {filepath}")

    with open(path, 'r', encoding=encoding) as f:
        text = f.read() if max_chars is None else f.read(max_chars)

    logger.info(f"Loaded {len(text):,} characters from {path}")
    return text
