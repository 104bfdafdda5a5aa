"""GitHub Models (Copilot) chat-completions endpoint, the default provider.
GitHub APIs require a User-Agent; the version header pins the API contract.
"""
from provider_client import ProviderSpec


GITHUB_CHAT_URL = "https://api.githubcopilot.com/chat/completions"
GITHUB_API_VERSION = "2023-07-07"

SPEC = ProviderSpec(
    name="github",
    url=GITHUB_CHAT_URL,
    extra_headers={"X-GitHub-Api-Version": GITHUB_API_VERSION},
)
