"""Single-attempt chat-completion client shared by all providers.

Providers differ only by endpoint, model and extra headers, captured in a
``ProviderSpec``. Failures are raised as typed errors; nothing is retried.
"""
from dataclasses import dataclass, field, replace
from typing import Dict, Mapping, Optional

import requests

from errors import NetworkError, http_error_for
from providers.schema import ChatCompletionRequest, ChatCompletionResponse, ChatMessage, CompletionResponse


DEFAULT_MODEL = "gpt-4o-mini"
USER_AGENT = "coffee-extractor-script"


@dataclass(frozen=True)
class ProviderSpec:
    name: str
    url: str
    model: str = DEFAULT_MODEL
    user_agent: str = USER_AGENT
    extra_headers: Mapping[str, str] = field(default_factory=dict)

    def headers(self, credential: str) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }
        headers.update(self.extra_headers)
        return headers

    def with_overrides(self, url: Optional[str] = None, model: Optional[str] = None,
                       user_agent: Optional[str] = None) -> "ProviderSpec":
        return replace(self,
                       url=url or self.url,
                       model=model or self.model,
                       user_agent=user_agent or self.user_agent)


def build_payload(spec: ProviderSpec, prompt: str) -> Dict:
    request = ChatCompletionRequest(model=spec.model, messages=[ChatMessage(role="user", content=prompt)])
    return request.model_dump()


def post_completion(spec: ProviderSpec, prompt: str, credential: str, timeout: float = 30) -> CompletionResponse:
    """POST one chat completion request and return the first choice's text.

    Raises:
        NetworkError: DNS, connection or timeout failure, or a non-JSON success body
        HttpError: any non-2xx status, classified by status code
    """
    try:
        resp = requests.post(spec.url, json=build_payload(spec, prompt), headers=spec.headers(credential),
                             timeout=timeout)
    except requests.RequestException as exc:
        raise NetworkError(f"{spec.name} request failed: {exc}") from exc

    if not 200 <= resp.status_code < 300:
        raise http_error_for(resp.status_code, resp.text)

    try:
        data = resp.json()
    except ValueError as exc:
        raise NetworkError(f"{spec.name} returned a non-JSON body") from exc

    text = ChatCompletionResponse.from_payload(data).first_content()
    return CompletionResponse(provider=spec.name, status=resp.status_code, text=text, raw=data)
