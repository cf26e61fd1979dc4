"""
Interceptors wrapping the handler resolution step.

Interceptors run in registration order. Before dispatch, the first
`preprocess` returning a non-empty result short-circuits the remaining
preprocessing and replaces rule/event handling. After dispatch, every
`postprocess` runs and may transform the running result.
"""

import logging
import time
from typing import Any, Dict, List

logger = logging.getLogger(__name__)


class Interceptor:
    """Base interceptor. Subclasses override either hook or both."""

    def preprocess(self, bot) -> Any:
        """
        Run before event/rule handling.

        Args:
            bot: The dispatch controller serving this request

        Returns:
            A non-empty result to skip handling, or None to continue
        """
        return None

    def postprocess(self, bot, result: Any) -> Any:
        """Run after handling; returns the (possibly transformed) result"""
        return result


class LoggingInterceptor(Interceptor):
    """Logs dispatch start and finish"""

    def __init__(self, log_level: int = logging.INFO):
        self.log_level = log_level
        self._started: Dict[int, float] = {}

    def preprocess(self, bot) -> Any:
        ctx = bot.context
        self._started[id(bot)] = time.time()
        logger.log(
            self.log_level,
            "Dispatching request",
            extra={
                "request_type": ctx.request_type,
                "intent_name": ctx.intent_name,
                "event_type": ctx.event_type,
            }
        )
        return None

    def postprocess(self, bot, result: Any) -> Any:
        started = self._started.pop(id(bot), None)
        processing_time = (time.time() - started) * 1000 if started else None
        logger.log(
            self.log_level,
            "Request dispatched",
            extra={
                "has_result": bool(result),
                "processing_time_ms": processing_time,
            }
        )
        return result


class InterceptChain:
    """Ordered interceptors with pre and post hooks"""

    def __init__(self):
        self.interceptors: List[Interceptor] = []

    def add(self, interceptor: Interceptor) -> 'InterceptChain':
        """Add interceptor to the chain"""
        if not isinstance(interceptor, Interceptor):
            raise TypeError(f"Expected an Interceptor, got {type(interceptor).__name__}")
        self.interceptors.append(interceptor)
        return self

    def run_pre(self, bot) -> Any:
        """First non-empty preprocess result, or None"""
        for interceptor in self.interceptors:
            result = interceptor.preprocess(bot)
            if result:
                logger.debug(f"{interceptor.__class__.__name__} short-circuited dispatch")
                return result
        return None

    def run_post(self, bot, result: Any) -> Any:
        """Feed the result through every postprocess hook"""
        for interceptor in self.interceptors:
            result = interceptor.postprocess(bot, result)
        return result

    def clear(self):
        """Clear all interceptors"""
        self.interceptors.clear()

    def __len__(self) -> int:
        return len(self.interceptors)
