"""Data models for the bot webhook"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any
from enum import Enum


class RequestType(str, Enum):
    """Request types the platform sends for the conversation lifecycle"""
    LAUNCH = "LaunchRequest"
    INTENT = "IntentRequest"
    SESSION_ENDED = "SessionEndedRequest"


class DispatchState(str, Enum):
    """Dispatch controller state machine states"""
    START = "start"
    EVENT_CHECK = "event_check"
    INTERCEPTED_DONE = "intercepted_done"
    HANDLING = "handling"
    POST_INTERCEPT = "post_intercept"
    BUILT = "built"


class SlotPayload(BaseModel):
    """A slot extracted by the NLU for an intent"""
    model_config = ConfigDict(extra="allow")

    name: Optional[str] = None
    value: Optional[Any] = None


class IntentPayload(BaseModel):
    """One NLU intent candidate"""
    model_config = ConfigDict(extra="allow")

    name: str
    slots: Dict[str, SlotPayload] = Field(default_factory=dict)


class SessionPayload(BaseModel):
    """Short-term session memory carried by the platform"""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    new: bool = False
    session_id: Optional[str] = Field(default=None, alias="sessionId")
    attributes: Dict[str, Any] = Field(default_factory=dict)


class RequestBody(BaseModel):
    """The `request` object. Event requests carry arbitrary extra fields."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str
    request_id: Optional[str] = Field(default=None, alias="requestId")
    query: Optional[Dict[str, Any]] = None
    intents: List[IntentPayload] = Field(default_factory=list)


class WebhookPayload(BaseModel):
    """Full request body posted to the bot webhook"""
    model_config = ConfigDict(extra="allow")

    version: str = "2.0"
    session: SessionPayload = Field(default_factory=SessionPayload)
    context: Dict[str, Any] = Field(default_factory=dict)
    request: RequestBody
