"""Provider failure taxonomy.

Raised by ``ChatCompletionClient`` implementations and absorbed by
``LLMAdapter``, which turns each category into a safe reply.  ``outcome``
doubles as the metrics / span label.
"""


class LLMError(Exception):
    """Base class for provider call failures."""

    outcome = "error"


class ProviderRateLimited(LLMError):
    outcome = "rate_limited"


class ProviderAuthError(LLMError):
    outcome = "auth_error"


class ProviderTimeout(LLMError):
    outcome = "timeout"


class ProviderUnavailable(LLMError):
    """The provider could not be reached (DNS, refused, reset)."""

    outcome = "unavailable"


class ProviderHTTPError(LLMError):
    outcome = "http_error"

    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Provider returned HTTP {status_code}: {body[:200]}")
        self.status_code = status_code


class ResponseParseError(LLMError):
    """The provider answered 2xx with a body we cannot read a reply from."""

    outcome = "parse_error"


class UnsupportedProvider(LLMError):
    outcome = "unsupported"
