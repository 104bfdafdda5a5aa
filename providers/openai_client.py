"""OpenAI chat-completions endpoint.
Selected explicitly with PROVIDER=openai or when an sk- key sits in the github slot.
"""
from provider_client import ProviderSpec


OPENAI_CHAT_URL = "https://api.openai.com/v1/chat/completions"

SPEC = ProviderSpec(name="openai", url=OPENAI_CHAT_URL)
