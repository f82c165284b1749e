"""Application layer: command processor tying classification to handlers."""
import logging
from typing import Dict, Optional

from gravybot.domain.commands import CommandHandler
from gravybot.domain.intent_classifier import Intent, IntentClassifier, default_classifier

logger = logging.getLogger(__name__)


class CommandProcessor:
    """Classify a line and dispatch its intent to the registered handler.

    ``process_line`` and ``dispatch`` never raise: anything a handler lets
    escape is logged and the line simply produces no reply.
    """

    def __init__(self, handlers: Dict[str, CommandHandler],
                 intent_classifier: Optional[IntentClassifier] = None):
        self.handlers = dict(handlers)
        self.intent_classifier = intent_classifier or default_classifier

    def register(self, intent_name: str, handler: CommandHandler) -> None:
        self.handlers[intent_name] = handler

    def dispatch(self, intent: Intent) -> str:
        handler = self.handlers.get(intent.name)
        if handler is None:
            logger.error(f"No handler registered for intent {intent.name}")
            return ""
        try:
            return handler.handle(intent) or ""
        except Exception as e:
            logger.error(f"Handler for {intent.name} failed: {e}", exc_info=True)
            return ""

    def process_line(self, line: str) -> str:
        intent = self.intent_classifier.classify(line)
        if intent is None:
            return ""
        logger.info(f"[CMD] {intent.name} from {intent.speaker_id} captures={list(intent.captures)}")
        return self.dispatch(intent)
