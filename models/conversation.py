"""
Conversation models for SiteCraft: chat messages, version history and the
request bodies that carry them.
"""
from pydantic import Field
from typing import List, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid

from models.generation import CamelModel, GeneratedCode, GenerationOptions


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MessageRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class Message(CamelModel):
    id: str = Field(default_factory=_new_id)
    role: MessageRole
    content: str
    timestamp: datetime = Field(default_factory=_utcnow)

    class Config:
        frozen = True


class VersionHistoryEntry(CamelModel):
    id: str = Field(default_factory=_new_id)
    timestamp: datetime = Field(default_factory=_utcnow)
    prompt: str
    code: GeneratedCode

    class Config:
        frozen = True


class GenerateRequest(CamelModel):
    # prompt is optional here so a missing prompt is reported as a 400 by the route
    prompt: Optional[str] = Field(default=None, description="User's description of the website")
    options: Optional[GenerationOptions] = Field(default=None)
    conversation: List[Message] = Field(default=[], description="Prior messages; non-empty means refinement")


class SessionCreate(CamelModel):
    options: Optional[GenerationOptions] = Field(default=None, description="Default options for every submission")


class SubmitMessageRequest(CamelModel):
    prompt: str = Field(..., description="The user's next message")
    options: Optional[GenerationOptions] = Field(default=None, description="Overrides the session defaults")


class SessionResponse(CamelModel):
    id: str
    state: str
    is_refining: bool
    is_generating: bool
    messages: List[Message]
    current_code: Optional[GeneratedCode] = None
    version_count: int
