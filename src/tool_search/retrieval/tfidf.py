"""
TF-IDF index construction and query scoring.

Provides fast keyword-based search over a small document collection
without any model download. The index is built once and never mutated;
callers replace it wholesale when the corpus changes.

Weighting is unsmoothed: ``tf(t, d) * ln(N / df(t))``. Terms present in
every document therefore carry zero weight, and a single-document corpus
produces all-zero vectors.
"""

import math
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from loguru import logger

from .cosine import cosine_similarity
from .tokenizer import tokenize


@dataclass(frozen=True)
class Document:
    """Indexing input: an identifier and the text to index."""

    id: str
    text: str


@dataclass(frozen=True)
class ScoredResult:
    """Document id with its cosine similarity to a query."""

    id: str
    score: float


@dataclass(frozen=True)
class TFIDFIndex:
    """
    Immutable TF-IDF index over a document collection.

    Invariants:
    - vocabulary is sorted ascending and duplicate-free
    - every vector has exactly len(vocabulary) entries
    - document_frequency has one entry per vocabulary term
    """

    document_count: int
    document_frequency: Mapping[str, int]  # term -> number of docs containing it
    term_frequencies: Mapping[str, Mapping[str, int]]  # doc id -> term -> count
    vectors: Mapping[str, tuple[float, ...]]  # doc id -> TF-IDF vector
    vocabulary: tuple[str, ...]

    def vectorize(self, term_counts: Mapping[str, int]) -> tuple[float, ...]:
        """
        Project term counts onto this index's vocabulary.

        Terms outside the vocabulary are ignored.
        """
        return _weigh(term_counts, self.vocabulary, self.document_frequency, self.document_count)


def _weigh(
    term_counts: Mapping[str, int],
    vocabulary: tuple[str, ...],
    document_frequency: Mapping[str, int],
    document_count: int,
) -> tuple[float, ...]:
    vector = [0.0] * len(vocabulary)
    for i, term in enumerate(vocabulary):
        term_freq = term_counts.get(term, 0)
        if term_freq > 0:
            vector[i] = term_freq * math.log(document_count / document_frequency[term])
    return tuple(vector)


def build_index(documents: Iterable[Document]) -> TFIDFIndex:
    """
    Build a TF-IDF index from documents.

    Documents without any extractable terms still count toward the
    document total but add nothing to the vocabulary.

    Args:
        documents: Documents to index

    Returns:
        Immutable TFIDFIndex
    """
    document_frequency: Counter[str] = Counter()
    term_frequencies: dict[str, Mapping[str, int]] = {}
    document_count = 0

    # First pass: term frequencies per document, document frequency per term
    for doc in documents:
        document_count += 1
        term_counts = Counter(tokenize(doc.text))
        document_frequency.update(term_counts.keys())
        term_frequencies[doc.id] = MappingProxyType(dict(term_counts))

    vocabulary = tuple(sorted(document_frequency))

    # Second pass: weight each document against the final vocabulary
    vectors = {
        doc_id: _weigh(term_counts, vocabulary, document_frequency, document_count)
        for doc_id, term_counts in term_frequencies.items()
    }
    assert all(len(vector) == len(vocabulary) for vector in vectors.values()), (
        "document vector length does not match vocabulary"
    )

    index = TFIDFIndex(
        document_count=document_count,
        document_frequency=MappingProxyType(dict(document_frequency)),
        term_frequencies=MappingProxyType(term_frequencies),
        vectors=MappingProxyType(vectors),
        vocabulary=vocabulary,
    )

    logger.debug(
        "Built TF-IDF index: documents={}, vocabulary={}", document_count, len(vocabulary)
    )
    return index


def score(query: str, index: TFIDFIndex, limit: int = 10) -> list[ScoredResult]:
    """
    Score a query against a TF-IDF index.

    The query is weighted with the index's own document frequencies, so
    idf stays corpus-relative. Only strictly positive similarities are
    returned; ties keep corpus order.

    Args:
        query: Search query
        index: Index to search
        limit: Maximum number of results

    Returns:
        Results sorted by descending score, at most ``limit`` long
    """
    query_tokens = tokenize(query)
    if not query_tokens or limit <= 0:
        return []

    query_vector = index.vectorize(Counter(query_tokens))

    results = []
    for doc_id, doc_vector in index.vectors.items():
        assert len(doc_vector) == len(query_vector), (
            f"Index vector for '{doc_id}' has {len(doc_vector)} entries, "
            f"vocabulary has {len(query_vector)}"
        )
        similarity = cosine_similarity(query_vector, doc_vector)
        if similarity > 0:
            results.append(ScoredResult(id=doc_id, score=similarity))

    # sort() is stable, so equal scores stay in corpus order
    results.sort(key=lambda result: result.score, reverse=True)
    return results[:limit]
