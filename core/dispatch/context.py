"""Read-only per-request view used by rule substitution and callbacks"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from core.dispatch.interfaces import NluResult, RequestContext, SessionAccessor


@dataclass(frozen=True)
class DispatchContext:
    """What the rule engine and callbacks may observe about one request"""
    request_type: str
    event: Optional[Dict[str, Any]]
    intent_name: Optional[str]
    session: SessionAccessor
    nlu: Optional[NluResult] = None

    @classmethod
    def from_request(cls, request: RequestContext) -> 'DispatchContext':
        nlu = request.get_nlu_result()
        return cls(
            request_type=request.get_request_type(),
            event=request.get_event_payload(),
            intent_name=nlu.get_intent_name() if nlu else None,
            session=request.get_session_accessor(),
            nlu=nlu,
        )

    @property
    def event_type(self) -> Optional[str]:
        if self.event:
            return self.event.get("type")
        return None

    def get_session(self, path: str, default: Any = None) -> Any:
        return self.session.get(path, default)

    def get_slot(self, name: str, index: int = 0) -> Any:
        if self.nlu is None:
            return None
        return self.nlu.get_slot(name, index)
