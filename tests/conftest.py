"""Shared fixtures for the dispatch tests."""

import pytest

from core.dispatch import DispatchContext
from core.platform import Nlu, Session


def build_payload(request_type="IntentRequest", intent=None, slots=None,
                  attributes=None, **request_fields):
    """Webhook payload in the platform's JSON shape."""
    request = {"type": request_type, "requestId": "req-1", **request_fields}
    if intent:
        request["intents"] = [{
            "name": intent,
            "slots": {
                name: {"name": name, "value": value}
                for name, value in (slots or {}).items()
            },
        }]
    return {
        "version": "2.0",
        "session": {"new": False, "sessionId": "session-1", "attributes": attributes or {}},
        "context": {"System": {"user": {"userId": "user-1"}}},
        "request": request,
    }


@pytest.fixture
def payload_factory():
    """Build webhook payloads."""
    return build_payload


@pytest.fixture
def context_factory():
    """Build dispatch contexts without going through a request."""
    def make(request_type="IntentRequest", intent=None, slots=None, attributes=None):
        nlu = None
        if intent:
            nlu = Nlu([{
                "name": intent,
                "slots": {k: {"name": k, "value": v} for k, v in (slots or {}).items()},
            }])
        return DispatchContext(
            request_type=request_type,
            event=None,
            intent_name=intent,
            session=Session(attributes or {}),
            nlu=nlu,
        )
    return make
