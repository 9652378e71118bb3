"""
Optional neural embedding pipeline.

Loads an embedding model lazily, at most once per reset cycle, and
degrades to "unavailable" (``None``) when the provider is missing or
fails to initialize. Callers treat ``None`` as "use TF-IDF instead".

State machine:
    UNLOADED -> LOADING -> READY | FAILED

READY and FAILED are sticky until ``unload()``. Concurrent ``load()``
calls while LOADING await the same in-flight task instead of starting
another load.
"""

import asyncio
import importlib.util
from collections.abc import Sequence
from enum import Enum
from typing import Any, Optional, Protocol

from loguru import logger

from ..config import Config

SENTENCE_TRANSFORMERS_MODULE = "sentence_transformers"


class ModelUnavailableError(RuntimeError):
    """Raised internally when the embedding provider cannot be used."""


class PipelineState(str, Enum):
    """Lifecycle of the embedding pipeline."""

    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class EmbeddingHandle(Protocol):
    """A loaded model that turns texts into vectors."""

    def encode(self, texts: list[str]) -> Sequence[Sequence[float]]:
        """Embed each text; returns one vector per input."""


class EmbeddingProvider(Protocol):
    """Capability interface for an optional embedding backend."""

    def available(self) -> bool:
        """Whether the backend can be loaded. Must not load anything."""

    async def load(self) -> EmbeddingHandle:
        """Initialize the backend. May be slow and may raise."""


class _SentenceTransformerHandle:
    def __init__(self, model: Any):
        self._model = model

    def encode(self, texts: list[str]) -> list[list[float]]:
        vectors = self._model.encode(texts, normalize_embeddings=True)
        return vectors.tolist()


class SentenceTransformerProvider:
    """
    Embedding provider backed by sentence-transformers.

    The package is an optional dependency (``pip install tool-search[neural]``);
    the first load downloads the model if it is not cached locally.
    """

    def __init__(self, model_name: Optional[str] = None):
        self.model_name = model_name or Config.EMBEDDING_MODEL

    def available(self) -> bool:
        return importlib.util.find_spec(SENTENCE_TRANSFORMERS_MODULE) is not None

    async def load(self) -> EmbeddingHandle:
        return await asyncio.to_thread(self._load_model)

    def _load_model(self) -> EmbeddingHandle:
        from sentence_transformers import SentenceTransformer

        logger.info(f"Loading embedding model {self.model_name}")
        return _SentenceTransformerHandle(SentenceTransformer(self.model_name))


def create_embedding_provider(model_name: Optional[str] = None) -> EmbeddingProvider:
    """Select the embedding provider for this process."""
    return SentenceTransformerProvider(model_name)


class EmbeddingPipeline:
    """
    Lazily loaded, single-flight embedding pipeline.

    Features:
    - At most one provider load per reset cycle
    - Concurrent loaders share the in-flight attempt
    - Sticky failure (no retries until ``unload()``)
    - Never raises to callers; unavailability is reported as ``None``
    """

    def __init__(self, provider: Optional[EmbeddingProvider] = None):
        self._provider = provider if provider is not None else create_embedding_provider()
        self._state = PipelineState.UNLOADED
        self._handle: Optional[EmbeddingHandle] = None
        self._error: Optional[BaseException] = None
        self._inflight: Optional[asyncio.Future] = None
        # Bumped by unload() so a load finishing after a reset is discarded
        self._generation = 0

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def provider(self) -> EmbeddingProvider:
        return self._provider

    def is_model_available(self) -> bool:
        """Availability check; performs no loading or I/O."""
        return self._provider.available()

    def is_ready(self) -> bool:
        return self._state is PipelineState.READY

    def get_load_error(self) -> Optional[BaseException]:
        """Error captured by the last failed load, if any."""
        return self._error

    async def load(self) -> Optional[EmbeddingHandle]:
        """
        Load the pipeline, or join the load already in progress.

        Returns:
            Ready handle, or None if the model is unavailable
        """
        if self._state is PipelineState.READY:
            return self._handle
        if self._state is PipelineState.FAILED:
            return None

        if self._inflight is not None and self._inflight.done() and self._inflight.cancelled():
            self._inflight = None

        if self._inflight is None:
            self._state = PipelineState.LOADING
            self._inflight = asyncio.ensure_future(self._load(self._generation))

        # shield: a cancelled caller must not cancel the shared load
        return await asyncio.shield(self._inflight)

    async def _load(self, generation: int) -> Optional[EmbeddingHandle]:
        try:
            if not self._provider.available():
                raise ModelUnavailableError(
                    f"Embedding provider {type(self._provider).__name__} is not installed"
                )
            handle = await self._provider.load()
        except asyncio.CancelledError:
            # Load task cancelled (e.g. event loop shutdown); the next caller starts over
            if generation == self._generation:
                self._state = PipelineState.UNLOADED
                self._inflight = None
            logger.debug("Embedding model load cancelled")
            raise
        except Exception as e:
            if generation == self._generation:
                self._error = e
                self._state = PipelineState.FAILED
                self._inflight = None
            logger.warning(f"Failed to load embedding model: {e}")
            return None

        if generation != self._generation:
            logger.debug("Discarding embedding model loaded before pipeline reset")
            return None

        self._handle = handle
        self._state = PipelineState.READY
        self._inflight = None
        logger.info("Embedding pipeline ready")
        return handle

    async def embed_query(self, text: str) -> Optional[list[float]]:
        """
        Embed a single text.

        Returns:
            Embedding vector, or None if the model is unavailable or encoding fails
        """
        handle = await self.load()
        if handle is None:
            return None

        try:
            vectors = await asyncio.to_thread(handle.encode, [text])
        except Exception as e:
            logger.warning(f"Failed to generate embedding: {e}")
            return None

        if not vectors or not len(vectors[0]):
            return None
        return [float(x) for x in vectors[0]]

    async def embed_texts(self, texts: Sequence[str]) -> list[Optional[list[float]]]:
        """
        Embed several texts in one call.

        Returns:
            One entry per input; entries are None when unavailable
        """
        texts = list(texts)
        if not texts:
            return []

        handle = await self.load()
        if handle is None:
            return [None] * len(texts)

        try:
            vectors = await asyncio.to_thread(handle.encode, texts)
        except Exception as e:
            logger.warning(f"Failed to generate embeddings: {e}")
            return [None] * len(texts)

        results: list[Optional[list[float]]] = []
        for i in range(len(texts)):
            vector = vectors[i] if i < len(vectors) else None
            results.append([float(x) for x in vector] if vector is not None and len(vector) else None)
        return results

    def unload(self) -> None:
        """Reset to UNLOADED, dropping any handle or captured error."""
        self._generation += 1
        self._state = PipelineState.UNLOADED
        self._handle = None
        self._error = None
        self._inflight = None


# ============================================================================
# Process-wide default pipeline
# ============================================================================

_pipeline: Optional[EmbeddingPipeline] = None


def get_pipeline() -> EmbeddingPipeline:
    """Get or create the process-wide pipeline."""
    global _pipeline
    if _pipeline is None:
        _pipeline = EmbeddingPipeline()
    return _pipeline


def set_pipeline(pipeline: Optional[EmbeddingPipeline]) -> None:
    """Install a pipeline as the process-wide default (None restores lazy creation)."""
    global _pipeline
    _pipeline = pipeline


def is_model_available() -> bool:
    return get_pipeline().is_model_available()


def is_pipeline_ready() -> bool:
    return get_pipeline().is_ready()


def get_load_error() -> Optional[BaseException]:
    return get_pipeline().get_load_error()


async def load_pipeline() -> Optional[EmbeddingHandle]:
    return await get_pipeline().load()


async def embed_query(text: str) -> Optional[list[float]]:
    return await get_pipeline().embed_query(text)


async def embed_texts(texts: Sequence[str]) -> list[Optional[list[float]]]:
    return await get_pipeline().embed_texts(texts)


def unload_pipeline() -> None:
    get_pipeline().unload()
