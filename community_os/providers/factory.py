"""Construct providers from application configuration."""

from dataclasses import dataclass

from community_os.config.environment import EnvironmentConfig
from community_os.config.models import AppConfig
from community_os.logging import get_logger

from .embeddings import OpenAIEmbeddingProvider
from .exceptions import ProviderConfigurationError, ProviderError
from .explainer import OpenAIExplainer
from .intro import OpenAIIntroGenerator

logger = get_logger(__name__, component="provider")


@dataclass
class Providers:
    embeddings: OpenAIEmbeddingProvider
    explainer: OpenAIExplainer
    intro: OpenAIIntroGenerator


def build_providers(app_config: AppConfig, env_config: EnvironmentConfig) -> Providers:
    """Create the embedding, explanation and intro providers.

    Model overrides from the environment have already been folded into
    app_config by load_config().

    Raises:
        ProviderConfigurationError: If OPENAI_API_KEY is missing or settings are invalid

    Example:
        >>> app_config, env_config = load_config()
        >>> providers = build_providers(app_config, env_config)
        >>> providers.embeddings.embed("rust developers")
    """
    openai = app_config.openai
    http = {
        "base_url": openai.base_url,
        "timeout": app_config.advanced.http_request_timeout,
        "user_agent": app_config.advanced.user_agent,
    }

    try:
        providers = Providers(
            embeddings=OpenAIEmbeddingProvider(
                env_config.openai_api_key,
                model=openai.embedding_model,
                dimensions=openai.embedding_dimensions,
                **http,
            ),
            explainer=OpenAIExplainer(
                env_config.openai_api_key,
                model=openai.llm_model,
                temperature=openai.explanation_temperature,
                max_tokens=openai.max_tokens,
                **http,
            ),
            intro=OpenAIIntroGenerator(
                env_config.openai_api_key,
                model=openai.llm_model,
                temperature=openai.intro_temperature,
                max_tokens=openai.max_tokens,
                **http,
            ),
        )
    except ProviderError:
        raise
    except Exception as e:
        raise ProviderConfigurationError(f"Failed to create providers: {e}") from e

    logger.debug(
        "Providers created",
        extra={
            "event": "provider.created",
            "embedding_model": openai.embedding_model,
            "llm_model": openai.llm_model,
        },
    )
    return providers
