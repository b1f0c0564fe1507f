"""Clients for the embedding and language-model APIs."""

from .base import BaseProvider
from .embeddings import OpenAIEmbeddingProvider
from .exceptions import (
    ProviderConfigurationError,
    ProviderError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
)
from .explainer import NO_RESULTS_EXPLANATION, OpenAIExplainer
from .factory import Providers, build_providers
from .intro import OpenAIIntroGenerator
from .models import EmbeddingResult, ExplanationResult, IntroResult

__all__ = [
    "BaseProvider",
    "OpenAIEmbeddingProvider",
    "OpenAIExplainer",
    "OpenAIIntroGenerator",
    "Providers",
    "build_providers",
    "EmbeddingResult",
    "ExplanationResult",
    "IntroResult",
    "NO_RESULTS_EXPLANATION",
    "ProviderError",
    "ProviderHTTPError",
    "ProviderTimeoutError",
    "ProviderResponseError",
    "ProviderConfigurationError",
]
