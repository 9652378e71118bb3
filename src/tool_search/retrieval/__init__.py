"""Keyword retrieval: tokenization, TF-IDF indexing and cosine ranking."""

from .cosine import cosine_similarity, dot_product, euclidean_distance, magnitude, normalize
from .tfidf import Document, ScoredResult, TFIDFIndex, build_index, score
from .tokenizer import STOPWORDS, extract_keywords, stem, tokenize

__all__ = [
    "Document",
    "STOPWORDS",
    "ScoredResult",
    "TFIDFIndex",
    "build_index",
    "cosine_similarity",
    "dot_product",
    "euclidean_distance",
    "extract_keywords",
    "magnitude",
    "normalize",
    "score",
    "stem",
    "tokenize",
]
