"""Reply envelope builder"""

import logging
from typing import Any, Dict, Optional

from core.dispatch.interfaces import RequestContext, ResponseBuilder

logger = logging.getLogger(__name__)


def _speech(value: Any) -> Optional[Dict[str, Any]]:
    """Wrap plain text or SSML into a speech object"""
    if value is None or isinstance(value, dict):
        return value
    text = str(value)
    if text.lstrip().startswith("<speak>"):
        return {"type": "SSML", "ssml": text}
    return {"type": "PlainText", "text": text}


class Response(ResponseBuilder):
    """
    Builds the reply for a handler result.

    A result is either a string (spoken as plain text) or a dict with any of
    `outputSpeech`, `reprompt`, `card`, `directives`, `resource` and
    `shouldEndSession`.
    """

    def __init__(self, request: RequestContext, version: Optional[str] = None):
        if version is None:
            from config import settings
            version = settings.RESPONSE_VERSION
        self.version = version
        self.session = request.get_session_accessor()
        self.nlu = request.get_nlu_result()
        self.should_end_session = True

    def set_should_end_session(self, flag: bool) -> None:
        self.should_end_session = bool(flag)

    def build_default(self) -> Dict[str, Any]:
        return {"status": 0, "msg": None}

    def build(self, result: Any) -> Dict[str, Any]:
        if not result:
            return self.build_default()
        if isinstance(result, str):
            result = {"outputSpeech": result}
        if not isinstance(result, dict):
            raise TypeError(f"Handler result must be a dict or str, got {type(result).__name__}")

        should_end_session = result.get("shouldEndSession", self.should_end_session)
        body = {
            "shouldEndSession": bool(should_end_session),
            "card": result.get("card"),
            "resource": result.get("resource"),
            "outputSpeech": _speech(result.get("outputSpeech")),
            "reprompt": {"outputSpeech": _speech(result["reprompt"])} if result.get("reprompt") else None,
            "directives": result.get("directives") or [],
        }

        reply = {
            "version": self.version,
            "context": self.nlu.to_update_intent() if self.nlu else {},
            "session": {"attributes": self.session.to_response()},
            "response": {k: v for k, v in body.items() if v is not None},
        }
        return reply
