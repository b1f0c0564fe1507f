"""Embedding generation for queries and profiles."""

import time
from typing import Optional

from community_os.logging import get_logger

from .base import BaseProvider
from .exceptions import ProviderResponseError
from .models import EmbeddingResult

logger = get_logger(__name__, component="provider")


class OpenAIEmbeddingProvider(BaseProvider):
    """Calls POST /embeddings.

    Queries and profiles must be embedded with the same model and
    dimensionality or similarity scores are meaningless.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "text-embedding-3-small",
        dimensions: int = 1536,
        **kwargs,
    ) -> None:
        super().__init__(api_key, **kwargs)
        self.model = model
        self.dimensions = dimensions

    def embed(self, text: str) -> EmbeddingResult:
        """Embed one piece of text.

        Raises:
            ValueError: If text is empty or whitespace-only
            ProviderResponseError: If the response carries no vector or a vector
                of the wrong length
            ProviderError: On any HTTP failure
        """
        if not text or not text.strip():
            raise ValueError("Text to embed cannot be empty")

        start = time.perf_counter()
        data = self._make_request(
            "/embeddings",
            json_data={
                "model": self.model,
                "input": text.strip(),
                "dimensions": self.dimensions,
            },
        )

        try:
            vector = data["data"][0]["embedding"]
        except (KeyError, IndexError, TypeError) as e:
            raise ProviderResponseError(f"Embedding missing from response: {e}") from e

        if not vector:
            raise ProviderResponseError("Received empty embedding")
        if len(vector) != self.dimensions:
            raise ProviderResponseError(
                f"Expected {self.dimensions}-dimensional embedding, got {len(vector)}"
            )

        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug(
            "Embedding generated",
            extra={
                "event": "provider.embedding.generated",
                "model": self.model,
                "input_length": len(text),
                "duration_ms": elapsed_ms,
            },
        )

        return EmbeddingResult(
            vector=[float(x) for x in vector],
            model=self.model,
            time_ms=elapsed_ms,
        )
