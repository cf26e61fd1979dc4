"""Dict-backed session attributes addressed by dotted paths"""

import copy
from typing import Any, Dict, Optional

from core.dispatch.interfaces import SessionAccessor


class Session(SessionAccessor):
    """
    Session attributes carried in the request and echoed back in the reply.

    Paths like 'user.city' address nested dicts; numeric segments index lists.
    """

    def __init__(self, attributes: Optional[Dict[str, Any]] = None):
        self.attributes: Dict[str, Any] = copy.deepcopy(attributes) if attributes else {}

    def get(self, path: Optional[str] = None, default: Any = None) -> Any:
        if not path:
            return self.attributes

        node: Any = self.attributes
        for key in path.split("."):
            if isinstance(node, dict) and key in node:
                node = node[key]
            elif isinstance(node, list) and key.isdigit() and int(key) < len(node):
                node = node[int(key)]
            else:
                return default
        return node

    def set(self, path: str, value: Any, default: Any = None) -> None:
        if not path:
            raise ValueError("Session path is required")
        if value is None:
            value = default

        keys = path.split(".")
        node = self.attributes
        for key in keys[:-1]:
            child = node.get(key)
            if not isinstance(child, dict):
                child = {}
                node[key] = child
            node = child
        node[keys[-1]] = value

    def clear(self) -> None:
        self.attributes = {}

    def to_response(self) -> Dict[str, Any]:
        return self.attributes
