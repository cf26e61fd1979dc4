"""
Interfaces of the collaborators the dispatch core consumes.

The core only relies on these methods; `core.platform` provides the
dict-backed implementations used by the webhook.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class SessionAccessor(ABC):
    """Short-term session memory addressed by dotted paths"""

    @abstractmethod
    def get(self, path: Optional[str] = None, default: Any = None) -> Any:
        """Value at `path` (e.g. 'a.b.c'), or `default` if missing"""
        pass

    @abstractmethod
    def set(self, path: str, value: Any, default: Any = None) -> None:
        """Set the value at `path`; `default` is stored when value is None"""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass

    @abstractmethod
    def to_response(self) -> Dict[str, Any]:
        """Attributes to send back with the reply"""
        pass


class NluResult(ABC):
    """NLU understanding of the user query"""

    @abstractmethod
    def get_intent_name(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_slot(self, name: str, index: int = 0) -> Any:
        pass

    @abstractmethod
    def set_slot(self, name: str, value: Any, index: int = 0) -> None:
        pass


class RequestContext(ABC):
    """Parsed inbound request"""

    @abstractmethod
    def get_request_type(self) -> str:
        pass

    @abstractmethod
    def get_event_payload(self) -> Optional[Dict[str, Any]]:
        """Event data with at least a 'type' key, or None for non-event requests"""
        pass

    @abstractmethod
    def get_session_accessor(self) -> SessionAccessor:
        pass

    @abstractmethod
    def get_nlu_result(self) -> Optional[NluResult]:
        pass


class ResponseBuilder(ABC):
    """Turns a handler result into the platform reply"""

    @abstractmethod
    def build_default(self) -> Any:
        pass

    @abstractmethod
    def build(self, result: Any) -> Any:
        pass

    @abstractmethod
    def set_should_end_session(self, flag: bool) -> None:
        pass
