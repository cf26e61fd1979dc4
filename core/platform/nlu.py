"""NLU result wrapper over the request's intent list"""

import copy
from typing import Any, Dict, List, Optional

from core.dispatch.interfaces import NluResult


class Nlu(NluResult):
    """Intents as parsed by the platform NLU, first intent being the best match"""

    def __init__(self, intents: List[Dict[str, Any]]):
        self.intents = copy.deepcopy(intents)
        self.updated = False

    def _intent(self, index: int) -> Optional[Dict[str, Any]]:
        if 0 <= index < len(self.intents):
            return self.intents[index]
        return None

    def get_intent_name(self) -> Optional[str]:
        intent = self._intent(0)
        return intent.get("name") if intent else None

    def get_slot(self, name: str, index: int = 0) -> Any:
        intent = self._intent(index)
        if not intent:
            return None
        slot = (intent.get("slots") or {}).get(name)
        if not slot:
            return None
        return slot.get("value")

    def set_slot(self, name: str, value: Any, index: int = 0) -> None:
        intent = self._intent(index)
        if intent is None:
            return
        slots = intent.setdefault("slots", {})
        slot = slots.setdefault(name, {"name": name})
        slot["value"] = value
        self.updated = True

    def to_update_intent(self) -> Dict[str, Any]:
        """Intent echoed in the reply context so slot changes reach the platform"""
        return {"intent": self._intent(0)}
