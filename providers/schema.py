from pydantic import BaseModel, ValidationError
from typing import Any, List, Optional


class ChatMessage(BaseModel):
    role: str
    content: str


class ChatCompletionRequest(BaseModel):
    model: str
    messages: List[ChatMessage]
    # Fixed at zero so identical prompts give identical extractions
    temperature: float = 0


class Choice(BaseModel):
    message: Optional[dict] = None
    text: Optional[str] = None


class ChatCompletionResponse(BaseModel):
    choices: List[Choice] = []

    @classmethod
    def from_payload(cls, data: Any) -> "ChatCompletionResponse":
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError:
            return cls()

    def first_content(self) -> str:
        if not self.choices:
            return ""
        message = self.choices[0].message or {}
        content = message.get("content")
        return content if isinstance(content, str) else ""


class CompletionResponse(BaseModel):
    provider: str
    status: int
    text: str = ""
    raw: Optional[Any] = None
