"""Default bot served by the webhook until an application installs its own"""

import logging

from core.dispatch import DispatchController, LoggingInterceptor

logger = logging.getLogger(__name__)


class WelcomeBot(DispatchController):
    """Greets users and remembers how many times they visited this session"""

    def setup(self):
        self.add_interceptor(LoggingInterceptor())

        self.on_launch(self.launch)
        self.on_session_ended(self.session_ended)
        self.on_rule("#greeting && session.visits >= 1", self.greet_again)
        self.on_intent("greeting", self.greet)
        self.on_event("AudioPlayer.PlaybackFinished", self.playback_finished)

    def _count_visit(self) -> int:
        visits = int(self.get_session_attribute("visits", 0) or 0) + 1
        self.set_session_attribute("visits", visits)
        return visits

    def launch(self):
        self._count_visit()
        self.wait_answer()
        return {
            "outputSpeech": "Welcome! Say hello to get started.",
            "reprompt": "You can say hello.",
        }

    def greet(self):
        self._count_visit()
        name = self.get_slot("name")
        self.wait_answer()
        if name:
            return {"outputSpeech": f"Hello, {name}!"}
        return {"outputSpeech": "Hello there!"}

    def greet_again(self):
        visits = self._count_visit()
        self.wait_answer()
        return {"outputSpeech": f"Hello again! That makes {visits} visits."}

    def session_ended(self):
        logger.info("Session ended, clearing attributes")
        self.clear_session_attribute()

    def playback_finished(self, event):
        logger.info(f"Playback finished for token {event.get('token')}")
        self.end_dialog()
        return {"outputSpeech": "Hope you enjoyed it."}
