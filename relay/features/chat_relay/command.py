import math
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ValidationInfo, field_validator

DEFAULT_MODEL = "xiaomi/mimo-v2-flash:free"

Number = Union[int, float]


def is_finite_number(value: Any) -> bool:
    # bool is an int subclass but never a valid sampling parameter
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        return math.isfinite(value)
    except OverflowError:
        # ints beyond float range, e.g. a 400-digit JSON literal
        return False


class ChatCompletionCommand(BaseModel):
    """
    The body forwarded to OpenRouter.

    Caller input is never rejected: anything of the wrong shape falls back
    to the field default.
    """
    model: str = DEFAULT_MODEL
    messages: List[Any] = []
    temperature: Number = 0.35
    top_p: Number = 0.9
    max_tokens: Number = 900

    @field_validator("model", mode="before")
    @classmethod
    def _model_or_default(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return DEFAULT_MODEL

    @field_validator("messages", mode="before")
    @classmethod
    def _messages_or_empty(cls, value: Any) -> List[Any]:
        return value if isinstance(value, list) else []

    @field_validator("temperature", "top_p", "max_tokens", mode="before")
    @classmethod
    def _finite_or_default(cls, value: Any, info: ValidationInfo) -> Any:
        if is_finite_number(value):
            return value
        return cls.model_fields[info.field_name].default

    @classmethod
    def from_body(cls, body: Any) -> "ChatCompletionCommand":
        if not isinstance(body, dict):
            body = {}
        return cls(**{name: body[name] for name in cls.model_fields if name in body})

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump()
