"""Rule-based replies used when the upstream model cannot answer.

Rules are evaluated in order and the first whose trigger appears
anywhere in the lower-cased input wins. Order encodes priority: the
specific topics come before the greetings, which come before the
generic question words, so ``"Hi, tell me about Karnataka"`` gets the
Karnataka answer even though ``"hi"`` appears first in the text.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class FallbackRule:
    """A group of trigger substrings sharing one canned reply."""

    triggers: tuple[str, ...]
    reply: str

    def matches(self, lowered: str) -> bool:
        return any(trigger in lowered for trigger in self.triggers)


FALLBACK_RULES: tuple[FallbackRule, ...] = (
    FallbackRule(
        ("pm of india", "prime minister of india", "who is pm"),
        "The Prime Minister of India is Narendra Modi. He has been serving as the PM "
        "since 2014 and was re-elected in 2019.",
    ),
    FallbackRule(
        ("karnataka", "bangalore", "bengaluru"),
        "Karnataka is a state in southern India. Its capital is Bengaluru (formerly "
        "Bangalore). It's known for its IT industry, rich culture, and historical sites "
        "like Hampi. The state is famous for its cuisine, classical dance forms, and the "
        "Kannada language.",
    ),
    FallbackRule(
        ("hello", "hi", "hey"),
        "Hello! I'm an AI chatbot. How can I help you today?",
    ),
    FallbackRule(
        ("how are you", "how do you do"),
        "I'm doing well, thank you for asking! I'm here to help you with any questions "
        "you might have.",
    ),
    FallbackRule(
        ("what are you", "who are you"),
        "I'm an AI chatbot designed to help answer questions and have conversations. "
        "I can provide information on various topics!",
    ),
    FallbackRule(
        ("what", "tell me about"),
        "I'd be happy to help you with that question! However, I'm currently using a "
        "fallback system. Could you be more specific about what you'd like to know?",
    ),
    FallbackRule(
        ("who",),
        "I can help with information about people! Could you tell me more specifically "
        "who you're asking about?",
    ),
    FallbackRule(
        ("when",),
        "I can help with information about dates and times! What specific event or time "
        "period are you asking about?",
    ),
    FallbackRule(
        ("where",),
        "I can help with information about places! What location are you asking about?",
    ),
)

DEFAULT_FALLBACK_REPLY = (
    "Thanks for your message! I'm here to help. Could you tell me more about what "
    "you'd like to know?"
)


class FallbackResponder:
    """Deterministic responder with no network dependency."""

    def __init__(
        self,
        rules: tuple[FallbackRule, ...] = FALLBACK_RULES,
        default_reply: str = DEFAULT_FALLBACK_REPLY,
    ) -> None:
        self.rules = rules
        self.default_reply = default_reply

    def respond(self, text: str) -> str:
        lowered = text.lower()
        for rule in self.rules:
            if rule.matches(lowered):
                return rule.reply
        return self.default_reply
