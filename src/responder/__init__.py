from .errors import AiUnavailable, ConfigError
from .knowledge import KnowledgeBase
from .pipeline import ChatResponder, build_responder
from .similarity import similarity
from .types import ConversationTurn, KnowledgeEntry, Provenance, Reply

__all__ = [
    "AiUnavailable",
    "ChatResponder",
    "ConfigError",
    "ConversationTurn",
    "KnowledgeBase",
    "KnowledgeEntry",
    "Provenance",
    "Reply",
    "build_responder",
    "similarity",
]
