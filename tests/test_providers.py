"""Unit tests for the embedding, explanation and intro providers."""

from unittest.mock import Mock, patch

import pytest
import requests

from community_os.config.environment import EnvironmentConfig
from community_os.config.models import AppConfig
from community_os.providers import (
    NO_RESULTS_EXPLANATION,
    OpenAIEmbeddingProvider,
    OpenAIExplainer,
    OpenAIIntroGenerator,
    ProviderConfigurationError,
    ProviderHTTPError,
    ProviderResponseError,
    ProviderTimeoutError,
    build_providers,
)
from community_os.providers.base import BaseProvider
from community_os.providers.explainer import EMPTY_COMPLETION_EXPLANATION
from community_os.providers.intro import describe_profile
from tests.helpers import make_match, make_profile


def make_response(status_code=200, body=None, reason="OK"):
    response = Mock(spec=requests.Response)
    response.status_code = status_code
    response.reason = reason
    if isinstance(body, Exception):
        response.json.side_effect = body
    else:
        response.json.return_value = body
    return response


def completion(content, total_tokens=55):
    return {
        "choices": [{"message": {"role": "assistant", "content": content}}],
        "usage": {"total_tokens": total_tokens},
    }


# ============================================================================
# BaseProvider
# ============================================================================


class TestBaseProvider:
    """Tests for BaseProvider construction and _make_request()."""

    def test_requires_api_key(self):
        """Test a missing or blank API key is a configuration error."""
        with pytest.raises(ProviderConfigurationError, match="OPENAI_API_KEY"):
            BaseProvider(None)

        with pytest.raises(ProviderConfigurationError):
            BaseProvider("   ")

    @pytest.mark.parametrize("timeout", [4, 301])
    def test_timeout_range(self, timeout):
        """Test timeouts outside 5..300 seconds are rejected."""
        with pytest.raises(ProviderConfigurationError, match="Timeout"):
            BaseProvider("sk-test", timeout=timeout)

    def test_session_headers(self):
        """Test the session carries auth, user agent and JSON content type."""
        provider = BaseProvider("sk-test", user_agent="  CommunityOS/1.0 ")

        headers = provider._session.headers
        assert headers["Authorization"] == "Bearer sk-test"
        assert headers["User-Agent"] == "CommunityOS/1.0"
        assert headers["Content-Type"] == "application/json"

    def test_successful_request(self):
        """Test a 200 JSON object is returned and the request is well formed."""
        provider = BaseProvider("sk-test", base_url="https://api.example.com/v1/", timeout=10)

        with patch.object(
            provider._session, "request", return_value=make_response(body={"ok": True})
        ) as mock_request:
            data = provider._make_request("/embeddings", json_data={"input": "x"})

        assert data == {"ok": True}
        mock_request.assert_called_once_with(
            method="POST",
            url="https://api.example.com/v1/embeddings",
            json={"input": "x"},
            timeout=10,
        )

    def test_http_error_uses_api_message(self):
        """Test 4xx/5xx responses raise ProviderHTTPError with the API's message."""
        provider = BaseProvider("sk-test")
        response = make_response(
            429, body={"error": {"message": "Rate limit exceeded"}}, reason="Too Many Requests"
        )

        with patch.object(provider._session, "request", return_value=response):
            with pytest.raises(ProviderHTTPError) as exc_info:
                provider._make_request("/chat/completions")

        assert exc_info.value.status_code == 429
        assert exc_info.value.url.endswith("/chat/completions")
        assert "Rate limit exceeded" in str(exc_info.value)

    def test_http_error_falls_back_to_reason(self):
        """Test a non-JSON error body reports the HTTP reason."""
        provider = BaseProvider("sk-test")
        response = make_response(502, body=ValueError("not json"), reason="Bad Gateway")

        with patch.object(provider._session, "request", return_value=response):
            with pytest.raises(ProviderHTTPError, match="Bad Gateway"):
                provider._make_request("/embeddings")

    def test_timeout(self):
        """Test request timeouts raise ProviderTimeoutError."""
        provider = BaseProvider("sk-test")

        with patch.object(
            provider._session, "request", side_effect=requests.exceptions.Timeout()
        ):
            with pytest.raises(ProviderTimeoutError):
                provider._make_request("/embeddings")

    def test_connection_error(self):
        """Test transport failures raise ProviderHTTPError with status 0."""
        provider = BaseProvider("sk-test")

        with patch.object(
            provider._session, "request", side_effect=requests.exceptions.ConnectionError("down")
        ):
            with pytest.raises(ProviderHTTPError) as exc_info:
                provider._make_request("/embeddings")

        assert exc_info.value.status_code == 0

    def test_invalid_json(self):
        """Test an unparseable body raises ProviderResponseError."""
        provider = BaseProvider("sk-test")

        with patch.object(
            provider._session, "request", return_value=make_response(body=ValueError("bad"))
        ):
            with pytest.raises(ProviderResponseError):
                provider._make_request("/embeddings")

    def test_non_object_body(self):
        """Test a JSON array body raises ProviderResponseError."""
        provider = BaseProvider("sk-test")

        with patch.object(provider._session, "request", return_value=make_response(body=[1, 2])):
            with pytest.raises(ProviderResponseError, match="JSON object"):
                provider._make_request("/embeddings")

    def test_complete_extracts_content_and_tokens(self):
        """Test chat completions return stripped content and token usage."""
        provider = BaseProvider("sk-test")

        with patch.object(
            provider, "_make_request", return_value=completion("  Hello there.  ")
        ) as mock_request:
            content, tokens = provider._complete("gpt-test", [], temperature=0.3, max_tokens=50)

        assert content == "Hello there."
        assert tokens == 55
        body = mock_request.call_args.kwargs["json_data"]
        assert body["model"] == "gpt-test"
        assert body["temperature"] == 0.3
        assert body["max_tokens"] == 50

    def test_complete_tolerates_missing_choices(self):
        """Test a completion without choices yields empty content."""
        provider = BaseProvider("sk-test")

        with patch.object(provider, "_make_request", return_value={}):
            assert provider._complete("gpt-test", [], 0.3, 50) == ("", None)


# ============================================================================
# Embeddings
# ============================================================================


class TestOpenAIEmbeddingProvider:
    """Tests for OpenAIEmbeddingProvider.embed()."""

    @pytest.fixture
    def provider(self):
        return OpenAIEmbeddingProvider("sk-test", model="embed-test", dimensions=3)

    def test_embed(self, provider):
        """Test a valid response becomes an EmbeddingResult."""
        body = {"data": [{"embedding": [0.1, 0.2, 0.3]}]}

        with patch.object(provider, "_make_request", return_value=body) as mock_request:
            result = provider.embed("  rust developers  ")

        assert result.vector == [0.1, 0.2, 0.3]
        assert result.model == "embed-test"
        assert result.time_ms >= 0
        mock_request.assert_called_once_with(
            "/embeddings",
            json_data={"model": "embed-test", "input": "rust developers", "dimensions": 3},
        )

    def test_empty_text_rejected_without_request(self, provider):
        """Test blank input raises ValueError before any HTTP call."""
        with patch.object(provider, "_make_request") as mock_request:
            with pytest.raises(ValueError):
                provider.embed("   ")

        mock_request.assert_not_called()

    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"data": []},
            {"data": [{"embedding": []}]},
            {"data": [{"embedding": [0.1, 0.2]}]},
        ],
    )
    def test_bad_embedding_payload(self, provider, body):
        """Test missing, empty or wrong-sized vectors raise ProviderResponseError."""
        with patch.object(provider, "_make_request", return_value=body):
            with pytest.raises(ProviderResponseError):
                provider.embed("rust")


# ============================================================================
# Explanations
# ============================================================================


class TestOpenAIExplainer:
    """Tests for OpenAIExplainer.explain()."""

    @pytest.fixture
    def explainer(self):
        return OpenAIExplainer("sk-test", model="llm-test")

    def test_no_matches_skips_api(self, explainer):
        """Test an empty result set returns the fixed message without a call."""
        with patch.object(explainer, "_make_request") as mock_request:
            result = explainer.explain("rust", [])

        assert result.explanation == NO_RESULTS_EXPLANATION
        assert result.tokens_used is None
        mock_request.assert_not_called()

    def test_explain_sends_only_candidate_context(self, explainer):
        """Test the prompt names the candidates but never their contact details."""
        ada = make_profile(1, "Ada", email="ada@example.com", skills=["Rust"], telegram="@ada")

        with patch.object(
            explainer, "_make_request", return_value=completion("Ada knows Rust.", 80)
        ) as mock_request:
            result = explainer.explain("rust", [make_match(ada)])

        assert result.explanation == "Ada knows Rust."
        assert result.model == "llm-test"
        assert result.tokens_used == 80

        messages = mock_request.call_args.kwargs["json_data"]["messages"]
        assert messages[0]["role"] == "system"
        user_prompt = messages[1]["content"]
        assert 'User Query: "rust"' in user_prompt
        assert '"name": "Ada"' in user_prompt
        assert "ada@example.com" not in user_prompt
        assert "@ada" not in user_prompt

    def test_empty_completion_uses_generic_text(self, explainer):
        """Test an empty reply is replaced with a generic explanation."""
        with patch.object(explainer, "_make_request", return_value=completion("   ")):
            result = explainer.explain("rust", [make_match(make_profile(1))])

        assert result.explanation == EMPTY_COMPLETION_EXPLANATION

    def test_api_errors_propagate(self, explainer):
        """Test provider errors are raised for the caller to handle."""
        error = ProviderHTTPError("HTTP 500", status_code=500, url="x")

        with patch.object(explainer, "_make_request", side_effect=error):
            with pytest.raises(ProviderHTTPError):
                explainer.explain("rust", [make_match(make_profile(1))])


# ============================================================================
# Intro messages
# ============================================================================


class TestOpenAIIntroGenerator:
    """Tests for OpenAIIntroGenerator.generate()."""

    @pytest.fixture
    def generator(self):
        return OpenAIIntroGenerator("sk-test", model="llm-test")

    def test_requires_target(self, generator):
        """Test a target profile or audience description is required."""
        with pytest.raises(ValueError):
            generator.generate(make_profile(1))

        with pytest.raises(ValueError):
            generator.generate(make_profile(1), target_description="  ")

    def test_intro_to_profile(self, generator):
        """Test both profiles are described in the prompt."""
        source = make_profile(1, "Ada", skills=["Rust"])
        target = make_profile(2, "Grace", needs_help="Rust onboarding")

        with patch.object(
            generator, "_make_request", return_value=completion("Hi Grace, meet Ada.")
        ) as mock_request:
            result = generator.generate(source, target=target)

        assert result.message == "Hi Grace, meet Ada."
        body = mock_request.call_args.kwargs["json_data"]
        assert body["temperature"] == 0.7
        prompt = body["messages"][1]["content"]
        assert "Name: Ada" in prompt
        assert "Name: Grace" in prompt
        assert "Needs Help With: Rust onboarding" in prompt

    def test_intro_to_audience(self, generator):
        """Test a free-text audience is used when there is no target."""
        with patch.object(
            generator, "_make_request", return_value=completion("Hello investors!")
        ) as mock_request:
            generator.generate(make_profile(1, "Ada"), target_description=" seed investors ")

        prompt = mock_request.call_args.kwargs["json_data"]["messages"][1]["content"]
        assert "Target Audience: seed investors" in prompt

    def test_empty_completion_fallback(self, generator):
        """Test an empty reply falls back to a plain introduction."""
        with patch.object(generator, "_make_request", return_value=completion("")):
            result = generator.generate(make_profile(1, "Ada"), target_description="founders")

        assert result.message == "Hi! I'd like to introduce you to Ada."

    def test_describe_profile_omits_empty_fields(self):
        """Test the profile description only lists filled fields."""
        text = describe_profile(
            make_profile(
                1, "Ada", skills=["Rust"], parsed_skills=["Go"], has_startup=True, startup_name="Acme"
            )
        )

        assert text == "Name: Ada\nSkills: Rust, Go\nStartup: Acme"


# ============================================================================
# Factory
# ============================================================================


class TestBuildProviders:
    """Tests for build_providers()."""

    def test_builds_all_providers(self):
        """Test providers share HTTP settings and use configured models."""
        app_config = AppConfig.model_validate(
            {
                "openai": {"embedding_model": "embed-x", "llm_model": "llm-x"},
                "advanced": {"http_request_timeout": 45},
            }
        )

        providers = build_providers(app_config, EnvironmentConfig(openai_api_key="sk-test"))

        assert providers.embeddings.model == "embed-x"
        assert providers.embeddings.dimensions == 1536
        assert providers.explainer.model == "llm-x"
        assert providers.explainer.temperature == 0.3
        assert providers.intro.temperature == 0.7
        assert providers.embeddings.timeout == 45

    def test_missing_api_key(self):
        """Test building without an API key is a configuration error."""
        with pytest.raises(ProviderConfigurationError):
            build_providers(AppConfig(), EnvironmentConfig())
