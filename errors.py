"""Typed failures raised by the extraction pipeline.

Every stage raises a subclass of ``ExtractionError``. The orchestrator catches
them and hands them back inside an ``ExtractionResult`` so callers can branch
on ``kind`` instead of parsing log output.
"""
from typing import Any, Dict, Optional


BODY_EXCERPT_CHARS = 500
COMPLETION_EXCERPT_CHARS = 200
CANDIDATE_EXCERPT_CHARS = 500


def excerpt(text: Optional[str], limit: int) -> str:
    return (text or "")[:limit]


class ExtractionError(Exception):
    """Base class for every failure of a single extraction call."""

    kind = "extraction_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind, "message": self.message}


class MissingCredential(ExtractionError):
    kind = "missing_credential"

    def __init__(self, provider: str, message: Optional[str] = None):
        super().__init__(message or f"No credential configured for provider '{provider}'")
        self.provider = provider

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["provider"] = self.provider
        return data


class CredentialMismatch(ExtractionError):
    kind = "credential_mismatch"


class NetworkError(ExtractionError):
    kind = "network_error"


class HttpError(ExtractionError):
    """Non-success HTTP status returned by a provider."""

    kind = "http_error"
    hint = "Provider returned an error."

    def __init__(self, status: int, body_excerpt: str = ""):
        super().__init__(f"Provider responded with HTTP {status}")
        self.status = status
        self.body_excerpt = excerpt(body_excerpt, BODY_EXCERPT_CHARS)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(status=self.status, body_excerpt=self.body_excerpt, hint=self.hint)
        return data


class BadRequest(HttpError):
    kind = "bad_request"
    hint = "Bad request. Check Authorization header formatting and token type/scope."


class Unauthorized(HttpError):
    kind = "unauthorized"
    hint = "Unauthorized. Token invalid or lacks Copilot scope."


class Forbidden(HttpError):
    kind = "forbidden"
    hint = "Forbidden. Copilot not enabled for this account/org."


class RateLimited(HttpError):
    kind = "rate_limited"
    hint = "Rate limited. Slow down or try later."


class OtherHttpError(HttpError):
    kind = "other_http_error"


HTTP_ERRORS = {
    400: BadRequest,
    401: Unauthorized,
    403: Forbidden,
    429: RateLimited,
}


def http_error_for(status: int, body: str = "") -> HttpError:
    """Classify a non-success status into its ``HttpError`` subclass."""
    return HTTP_ERRORS.get(status, OtherHttpError)(status, body)


class NoJsonFound(ExtractionError):
    kind = "no_json_found"

    def __init__(self, completion: str = ""):
        super().__init__("No JSON detected in model output")
        self.completion_excerpt = excerpt(completion, COMPLETION_EXCERPT_CHARS)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["completion_excerpt"] = self.completion_excerpt
        return data


class MalformedJson(ExtractionError):
    kind = "malformed_json"

    def __init__(self, message: str, candidate: str = ""):
        super().__init__(f"Failed to parse JSON: {message}")
        self.parser_message = message
        self.candidate_excerpt = excerpt(candidate, CANDIDATE_EXCERPT_CHARS)

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["candidate_excerpt"] = self.candidate_excerpt
        return data


class ExtractionCancelled(ExtractionError):
    kind = "cancelled"

    def __init__(self, message: str = "Extraction cancelled by caller"):
        super().__init__(message)
