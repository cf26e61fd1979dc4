"""Inbound webhook request wrapper"""

import logging
from typing import Any, Dict, Optional, Union

from core.dispatch.interfaces import RequestContext
from core.platform.nlu import Nlu
from core.platform.session import Session
from models.schemas import RequestType, WebhookPayload

logger = logging.getLogger(__name__)

CORE_REQUEST_TYPES = {t.value for t in RequestType}


class Request(RequestContext):
    """
    Parsed platform request.

    Requests whose type is not one of the lifecycle types (launch, intent,
    session ended) are platform events; their `request` object is the event
    payload.
    """

    def __init__(self, payload: Union[Dict[str, Any], WebhookPayload]):
        if not isinstance(payload, WebhookPayload):
            payload = WebhookPayload.model_validate(payload)
        self.payload = payload
        self.data: Dict[str, Any] = payload.model_dump(by_alias=True, exclude_none=True)

        self.session = Session(payload.session.attributes)
        intents = self.data["request"].get("intents") or []
        self.nlu = Nlu(intents) if intents else None

        logger.debug(
            f"Parsed request type={self.get_request_type()} "
            f"intents={len(intents)} session_new={payload.session.new}"
        )

    def get_request_type(self) -> str:
        return self.payload.request.type

    def get_event_payload(self) -> Optional[Dict[str, Any]]:
        if self.get_request_type() in CORE_REQUEST_TYPES:
            return None
        return self.data["request"]

    def get_session_accessor(self) -> Session:
        return self.session

    def get_nlu_result(self) -> Optional[Nlu]:
        return self.nlu

    def get_query(self) -> Optional[str]:
        """Original user utterance"""
        query = self.payload.request.query or {}
        return query.get("original")

    def get_session_id(self) -> Optional[str]:
        return self.payload.session.session_id

    def is_new_session(self) -> bool:
        return self.payload.session.new

    def get_user_id(self) -> Optional[str]:
        system = self.payload.context.get("System") or {}
        return (system.get("user") or {}).get("userId")
