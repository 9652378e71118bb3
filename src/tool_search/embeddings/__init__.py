"""Optional neural embeddings for query matching."""

from .pipeline import (
    EmbeddingHandle,
    EmbeddingPipeline,
    EmbeddingProvider,
    ModelUnavailableError,
    PipelineState,
    SentenceTransformerProvider,
    create_embedding_provider,
    embed_query,
    embed_texts,
    get_load_error,
    get_pipeline,
    is_model_available,
    is_pipeline_ready,
    load_pipeline,
    set_pipeline,
    unload_pipeline,
)

__all__ = [
    "EmbeddingHandle",
    "EmbeddingPipeline",
    "EmbeddingProvider",
    "ModelUnavailableError",
    "PipelineState",
    "SentenceTransformerProvider",
    "create_embedding_provider",
    "embed_query",
    "embed_texts",
    "get_load_error",
    "get_pipeline",
    "is_model_available",
    "is_pipeline_ready",
    "load_pipeline",
    "set_pipeline",
    "unload_pipeline",
]
