"""
Registries for rule handlers and platform event handlers.

Rule handlers are kept in registration order and walked in that order.
Event handlers are keyed by event type; registering again replaces the
previous callback.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Iterator, List, Optional, Union

from models.schemas import RequestType

logger = logging.getLogger(__name__)

RuleCallback = Callable[[], Any]
EventCallback = Callable[[Dict[str, Any]], Any]


class TagKind(str, Enum):
    """What a reserved rule tag matches on"""
    REQUEST_TYPE = "request_type"
    INTENT = "intent"


@dataclass(frozen=True)
class RequestTypeTag:
    """Shortcut condition matched directly, without the rule language"""
    kind: TagKind
    value: str

    def matches(self, ctx) -> bool:
        if self.kind == TagKind.REQUEST_TYPE:
            return ctx.request_type == self.value
        return ctx.intent_name == self.value

    def __str__(self):
        if self.kind == TagKind.INTENT:
            return f"intent:{self.value}"
        return self.value


@dataclass(frozen=True)
class HandlerEntry:
    """A condition and the callback run when it holds"""
    rule: Union[str, RequestTypeTag]
    callback: RuleCallback

    @property
    def is_tag(self) -> bool:
        return isinstance(self.rule, RequestTypeTag)


def _require_callable(callback: Any, what: str):
    if not callable(callback):
        raise TypeError(f"{what} callback must be callable, got {type(callback).__name__}")


class HandlerRegistry:
    """Ordered list of rule handlers"""

    def __init__(self):
        self.entries: List[HandlerEntry] = []

    def register(self, rule: Union[str, RequestTypeTag], callback: RuleCallback) -> HandlerEntry:
        """
        Append a handler. Identical rules are not deduplicated.

        Args:
            rule: Rule string, or a reserved tag
            callback: Called with no arguments when the rule holds

        Returns:
            The stored entry
        """
        _require_callable(callback, "Rule handler")
        if not isinstance(rule, (str, RequestTypeTag)):
            raise TypeError(f"Rule must be a string or RequestTypeTag, got {type(rule).__name__}")

        entry = HandlerEntry(rule=rule, callback=callback)
        self.entries.append(entry)
        logger.debug(f"Registered handler #{len(self.entries)} for rule {str(rule)!r}")
        return entry

    def register_launch(self, callback: RuleCallback) -> HandlerEntry:
        return self.register(RequestTypeTag(TagKind.REQUEST_TYPE, RequestType.LAUNCH.value), callback)

    def register_session_ended(self, callback: RuleCallback) -> HandlerEntry:
        return self.register(RequestTypeTag(TagKind.REQUEST_TYPE, RequestType.SESSION_ENDED.value), callback)

    def register_intent(self, intent_name: str, callback: RuleCallback) -> HandlerEntry:
        if not intent_name:
            raise ValueError("Intent name is required")
        return self.register(RequestTypeTag(TagKind.INTENT, intent_name), callback)

    def clear(self):
        """Remove all handlers"""
        self.entries.clear()

    def __iter__(self) -> Iterator[HandlerEntry]:
        return iter(list(self.entries))

    def __len__(self) -> int:
        return len(self.entries)


class EventRegistry:
    """Maps platform event types to a single callback"""

    def __init__(self):
        self._handlers: Dict[str, EventCallback] = {}

    def register(self, event_type: str, callback: EventCallback):
        """Bind a callback to an event type, replacing any earlier one"""
        if not event_type:
            raise ValueError("Event type is required")
        _require_callable(callback, "Event handler")

        if event_type in self._handlers:
            logger.info(f"Replacing handler for event '{event_type}'")
        self._handlers[event_type] = callback

    def lookup(self, event_type: Optional[str]) -> Optional[EventCallback]:
        if not event_type:
            return None
        return self._handlers.get(event_type)

    def clear(self):
        self._handlers.clear()

    def __contains__(self, event_type: str) -> bool:
        return event_type in self._handlers

    def __len__(self) -> int:
        return len(self._handlers)
