"""Domain layer: Intent classification using Strategy pattern.

A line is only considered when it carries a speaker tag such as
``[Bob(#42)]``. After that the rule table is walked in order and the first
rule that matches decides the intent. New intents are added by appending a
``Rule`` to the table, not by editing ``classify``.
"""
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, Tuple

logger = logging.getLogger(__name__)

URL_BATCH = "url_batch"
HANGOUT = "hangout"
HOME = "home"
TRANSLATE = "translate"
WEATHER = "weather"
STOCK = "stock"

DEFAULT_TRIGGER = "Gravybot"

# first tag wins, so a tag quoted later in the line cannot set the speaker
SPEAKER_TAG = re.compile(r"^\[.*?\((#\d+)\)\]")


@dataclass(frozen=True)
class Intent:
    """Classified meaning of a line plus its captured parameters."""
    name: str
    captures: Tuple[str, ...]
    speaker_id: str


@dataclass(frozen=True)
class Rule:
    """One ordered pattern-to-intent mapping.

    ``arity`` is the number of captures the rule must produce. ``find_all``
    rules scan the whole line and capture every occurrence instead of the
    groups of a single match.
    """
    name: str
    pattern: re.Pattern
    arity: int
    find_all: bool = False

    def captures(self, line: str) -> Optional[Tuple[str, ...]]:
        if self.find_all:
            found = [m.group(0) for m in self.pattern.finditer(line)]
            return tuple(found) if found else None
        match = self.pattern.search(line)
        if match is None:
            return None
        return match.groups()


def build_rules(trigger: str = DEFAULT_TRIGGER) -> Tuple[Rule, ...]:
    """Build the rule table in precedence order."""
    tag = r"^\[.*?\(#\d+\)\]"
    says = tag + r" (?:.+ )?says \""
    bot = re.escape(trigger) + r",?"
    return (
        Rule(URL_BATCH,
             re.compile(r"(?:https?:|ftps?:|telnets?:|ssh:|www\.)[^\s\"]+"),
             arity=0, find_all=True),
        Rule(HANGOUT, re.compile(tag + r" (?:.+ )?pages: hangout$"), arity=0),
        Rule(HOME, re.compile(tag + r" (?:.+ )?pages: home$"), arity=0),
        Rule(TRANSLATE,
             re.compile(says + bot + r" translate (\S+) (\S+) (.*)\"$", re.IGNORECASE),
             arity=3),
        Rule(WEATHER,
             re.compile(says + bot + r" weather (.+)\"$", re.IGNORECASE),
             arity=1),
        Rule(STOCK,
             re.compile(says + r"(?:gbs|" + bot + r" stock) (.+)\"$", re.IGNORECASE),
             arity=1),
    )


DEFAULT_RULES = build_rules()


class IntentClassifier(ABC):
    """Strategy interface for classifying chat lines."""

    @abstractmethod
    def classify(self, line: str) -> Optional[Intent]:
        """Classify the intent of a line, or return None."""
        pass


class RegexIntentClassifier(IntentClassifier):
    """Concrete strategy using an ordered regex rule table."""

    def __init__(self, rules: Optional[Tuple[Rule, ...]] = None):
        self.rules: Tuple[Rule, ...] = rules if rules is not None else DEFAULT_RULES

    def speaker_id(self, line: str) -> Optional[str]:
        match = SPEAKER_TAG.match(line)
        return match.group(1) if match else None

    def classify(self, line: str) -> Optional[Intent]:
        """Return the first matching intent; None when untagged or unmatched."""
        speaker = self.speaker_id(line)
        if speaker is None:
            return None

        for rule in self.rules:
            captures = rule.captures(line)
            if captures is None:
                continue
            # URL sweeps carry a variable number of captures
            if not rule.find_all and len(captures) != rule.arity:
                logger.error(
                    f"Rule {rule.name} captured {len(captures)} groups, expected {rule.arity}; ignoring line"
                )
                return None
            return Intent(name=rule.name, captures=captures, speaker_id=speaker)
        return None


# Default classifier instance
default_classifier = RegexIntentClassifier()
