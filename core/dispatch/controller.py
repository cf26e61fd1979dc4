"""
Dispatch controller.

One controller serves exactly one request. Bots either subclass it and
register handlers in `setup()`, or register handlers on an instance before
calling `run()`:

    class WeatherBot(DispatchController):
        def setup(self):
            self.on_launch(lambda: {"outputSpeech": "Hi, which city?"})
            self.on_rule("#weather && slot.city == 'beijing'", self.beijing)
            self.on_event("AudioPlayer.PlaybackStarted", self.playback_started)

    reply = WeatherBot(request).run()

Resolution order: an intent request without NLU and without an event handler
gets the default reply straight away; otherwise interceptors' preprocess hooks
may claim the request, else the event handler (if one is bound to the event
type) or the first rule handler whose condition holds and whose callback
returns something non-empty produces the result. Postprocess hooks then see
the result before it is built.
"""

import logging
from typing import Any, Dict, Optional, Union

from core.dispatch.context import DispatchContext
from core.dispatch.intercept import InterceptChain, Interceptor
from core.dispatch.interfaces import RequestContext, ResponseBuilder
from core.dispatch.registry import EventCallback, EventRegistry, HandlerRegistry, RuleCallback
from core.rules import RuleEngine, get_rule_engine
from models.schemas import DispatchState, RequestType, WebhookPayload

logger = logging.getLogger(__name__)


class DispatchController:
    """Decides which registered callback answers a request"""

    def __init__(self, request: RequestContext, response: Optional[ResponseBuilder] = None,
                 rule_engine: Optional[RuleEngine] = None):
        self.request = request
        self.session = request.get_session_accessor()
        self.nlu = request.get_nlu_result()
        if response is None:
            from core.platform import Response
            response = Response(request)
        self.response = response
        self.context = DispatchContext.from_request(request)

        self.rule_engine = rule_engine or get_rule_engine()
        self.handlers = HandlerRegistry()
        self.events = EventRegistry()
        self.intercepts = InterceptChain()
        self.state = DispatchState.START

        self.setup()

    @classmethod
    def from_payload(cls, payload: Union[Dict[str, Any], WebhookPayload], **kwargs) -> 'DispatchController':
        """Build a controller for a raw webhook payload"""
        from core.platform import Request
        return cls(Request(payload), **kwargs)

    def setup(self):
        """Register handlers. Subclasses override this."""
        pass

    # Registration

    def on_launch(self, callback: RuleCallback):
        """Handle LaunchRequest"""
        self.handlers.register_launch(callback)

    def on_session_ended(self, callback: RuleCallback):
        """Handle SessionEndedRequest. The platform ignores the result."""
        self.handlers.register_session_ended(callback)

    def on_intent(self, intent_name: str, callback: RuleCallback):
        """Handle a named intent"""
        self.handlers.register_intent(intent_name, callback)

    def on_rule(self, rule: str, callback: RuleCallback):
        """
        Handle requests for which `rule` holds.

        Rules are tried in registration order. A callback returning an empty
        result lets the walk continue to later rules.
        """
        self.handlers.register(rule, callback)

    def on_event(self, event_type: str, callback: EventCallback):
        """Bind a platform event, e.g. 'AudioPlayer.PlaybackStarted'"""
        self.events.register(event_type, callback)

    def add_interceptor(self, interceptor: Interceptor):
        self.intercepts.add(interceptor)

    # Shortcuts

    @property
    def intent_name(self) -> Optional[str]:
        """Name of the first intent, if any"""
        return self.context.intent_name

    def get_session_attribute(self, field: Optional[str] = None, default: Any = None) -> Any:
        return self.session.get(field, default)

    def set_session_attribute(self, field: str, value: Any, default: Any = None):
        """Set a session field; 'a.b.c' addresses session['a']['b']['c']"""
        self.session.set(field, value, default)

    def clear_session_attribute(self):
        self.session.clear()

    def get_slot(self, field: str, index: int = 0) -> Any:
        if self.nlu is None:
            return None
        return self.nlu.get_slot(field, index)

    def set_slot(self, field: str, value: Any, index: int = 0):
        if self.nlu is not None:
            self.nlu.set_slot(field, value, index)

    def wait_answer(self):
        """Keep the session open for the user's answer"""
        self.response.set_should_end_session(False)

    def end_dialog(self):
        self.response.set_should_end_session(True)

    # Dispatch

    def run(self, build_response: bool = True) -> Any:
        """
        Resolve the request to a result.

        Args:
            build_response: If False, return the handler result unbuilt

        Returns:
            The built response, or the raw result
        """
        if self.state != DispatchState.START:
            raise RuntimeError("DispatchController serves a single request; create a new one")

        self.state = DispatchState.EVENT_CHECK
        event_handler = self.events.lookup(self.context.event_type)

        # Bypasses interceptors as well as handlers
        if (self.context.request_type == RequestType.INTENT.value
                and self.nlu is None and event_handler is None):
            logger.info("Intent request without NLU result or event handler, returning default result")
            self.state = DispatchState.BUILT
            return self.response.build_default()

        result = self._call(self.intercepts.run_pre, self)
        if result:
            self.state = DispatchState.INTERCEPTED_DONE
        else:
            self.state = DispatchState.HANDLING
            if event_handler is not None:
                logger.debug(f"Dispatching event '{self.context.event_type}'")
                result = self._call(event_handler, self.context.event)
            else:
                result = self._dispatch()

        self.state = DispatchState.POST_INTERCEPT
        result = self._call(self.intercepts.run_post, self, result)

        self.state = DispatchState.BUILT
        if not build_response:
            return result
        return self.response.build(result)

    def _dispatch(self) -> Any:
        """Walk rule handlers in order; first non-empty result wins"""
        for entry in self.handlers:
            if entry.is_tag:
                matched = entry.rule.matches(self.context)
            else:
                matched = self.rule_engine.matches(entry.rule, self.context)
            if not matched:
                continue

            result = self._call(entry.callback)
            if result:
                logger.debug(f"Rule {str(entry.rule)!r} produced the result")
                return result
            logger.debug(f"Rule {str(entry.rule)!r} matched with empty result, continuing")

        logger.debug("No handler produced a result")
        return None

    def _call(self, func, *args) -> Any:
        try:
            return func(*args)
        except Exception as e:
            logger.error(
                f"Handler failed: {str(e)}",
                extra={
                    "dispatch_state": self.state.value,
                    "error_type": type(e).__name__,
                },
                exc_info=True
            )
            raise
