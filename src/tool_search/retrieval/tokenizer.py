"""
Tokenization and light stemming for tool descriptions and queries.

Queries and documents go through the exact same pipeline so that the
query vector lands in the same term space as the indexed documents.
"""

import re
from collections import Counter

# Everything that is not a word character becomes a separator.
# Underscore is kept so identifiers like wpnav_list_posts stay intact.
_NON_WORD = re.compile(r"[^a-z0-9_]+")

STOPWORDS = frozenset(
    {
        "a",
        "an",
        "and",
        "are",
        "as",
        "at",
        "be",
        "by",
        "for",
        "from",
        "has",
        "he",
        "in",
        "is",
        "it",
        "its",
        "of",
        "on",
        "or",
        "that",
        "the",
        "to",
        "was",
        "were",
        "will",
        "with",
        "this",
        "can",
        "you",
        "your",
        "all",
        "also",
        "any",
        "but",
        "etc",
        "if",
        "into",
        "may",
        "no",
        "not",
        "only",
        "other",
        "our",
        "out",
        "so",
        "some",
        "such",
        "than",
        "their",
        "them",
        "then",
        "there",
        "these",
        "they",
        "when",
        "which",
        "who",
        "would",
    }
)

# (suffix, replacement), tried in order; first applicable rule wins.
_SUFFIX_RULES: tuple[tuple[str, str], ...] = (
    ("ing", ""),
    ("ed", ""),
    ("es", ""),
    ("s", ""),
    ("tion", "t"),
    ("ment", ""),
    ("ness", ""),
    ("able", ""),
    ("ible", ""),
    ("ly", ""),
)

_MIN_STEM_LENGTH = 3


def stem(word: str) -> str:
    """
    Strip a common English suffix from a word.

    A rule only fires when the remaining stem is longer than two
    characters, except ``-tion`` which always rewrites to ``-t``.
    Words ending in ``ss`` keep their final ``s``.

    Args:
        word: Lowercase word token

    Returns:
        Stemmed token (or the word unchanged when no rule applies)
    """
    for suffix, replacement in _SUFFIX_RULES:
        if not word.endswith(suffix):
            continue
        if suffix == "s" and word.endswith("ss"):
            continue

        base = word[: -len(suffix)]
        if suffix == "tion":
            return base + replacement
        if len(base) >= _MIN_STEM_LENGTH:
            return base + replacement

    return word


def tokenize(text: str) -> list[str]:
    """
    Tokenize text into normalized terms.

    Lowercases, splits on anything outside ``[a-z0-9_]``, drops single
    characters and stopwords, then stems what remains. Stems that
    collapse to a stopword or a single character are dropped as well.

    Args:
        text: Input text to tokenize

    Returns:
        List of stemmed tokens (empty for empty or whitespace-only input)
    """
    if not text:
        return []

    tokens = []
    for word in _NON_WORD.sub(" ", text.lower()).split():
        if len(word) <= 1 or word in STOPWORDS:
            continue
        token = stem(word)
        # -tion can stem to a stopword or single letter ("ation" -> "at")
        if len(token) > 1 and token not in STOPWORDS:
            tokens.append(token)
    return tokens


def extract_keywords(text: str, max_keywords: int = 20) -> list[str]:
    """
    Extract the most frequent terms from text.

    Used at catalog build time to precompute keyword lists.

    Args:
        text: Input text
        max_keywords: Maximum number of keywords to return

    Returns:
        Distinct tokens ordered by descending frequency
    """
    if max_keywords <= 0:
        return []
    # most_common() keeps first-occurrence order among equal counts
    return [token for token, _count in Counter(tokenize(text)).most_common(max_keywords)]
