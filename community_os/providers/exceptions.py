"""Exceptions raised by the embedding and language-model providers."""


class ProviderError(Exception):
    """Base exception for all provider errors.

    The search pipeline catches this (and anything else) per stage and turns it
    into a typed search error code.
    """

    pass


class ProviderHTTPError(ProviderError):
    """The provider answered with a 4xx/5xx status or the transport failed.

    A status_code of 0 means no response was received at all.
    """

    def __init__(self, message: str, status_code: int, url: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class ProviderTimeoutError(ProviderError):
    """The request did not complete within the configured timeout."""

    def __init__(self, message: str, url: str) -> None:
        super().__init__(message)
        self.url = url


class ProviderResponseError(ProviderError):
    """A response arrived but could not be used.

    Examples: invalid JSON, no embedding in the payload, or an embedding with
    the wrong number of dimensions.
    """

    pass


class ProviderConfigurationError(ProviderError):
    """The provider cannot be constructed (missing API key, bad timeout...)."""

    pass
