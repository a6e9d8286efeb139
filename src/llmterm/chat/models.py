"""Wire and transcript data models.

Hides the JSON shape of the chat endpoint. Field names of ResponseFragment
follow the wire format so a stream line validates directly into a model.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author of a message."""

    USER = "user"
    ASSISTANT = "assistant"


class Message(BaseModel):
    """A single role-tagged message in the conversation."""

    model_config = ConfigDict(frozen=True, use_enum_values=True, validate_default=True)

    role: Role = Field(default=Role.ASSISTANT, description="Author of the message")
    content: str = Field(default="", description="Text of the message")


class ChatRequest(BaseModel):
    """One chat completion request, built fresh for every turn."""

    model_config = ConfigDict(frozen=True)

    model: str = Field(description="Model identifier understood by the endpoint")
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    messages: tuple[Message, ...] = Field(description="Transcript snapshot sent as context")

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON body posted to the endpoint."""
        return {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [msg.model_dump() for msg in self.messages],
            "stream": True,
        }


class ResponseFragment(BaseModel):
    """One decoded unit of a streamed chat response.

    Earlier fragments carry only a partial assistant message. The final
    fragment (done=True) may carry no text but holds the aggregate counters.
    Durations are in nanoseconds.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    model: str = ""
    message: Message = Field(default_factory=Message)
    done: bool = False
    done_reason: str | None = None
    total_duration: int = 0
    load_duration: int = 0
    prompt_eval_count: int = 0
    prompt_eval_duration: int = 0
    eval_count: int = 0
    eval_duration: int = 0

    @property
    def is_final(self) -> bool:
        return self.done

    @property
    def delta(self) -> Message:
        return self.message

    @property
    def content(self) -> str:
        return self.message.content
