import time
from pathlib import Path
from typing import List, Optional

import pytest

from responder import ChatResponder, KnowledgeBase

DATA_DIR = Path(__file__).resolve().parents[1] / "data"

REMINDER_ANSWER = "You can say 'Set a reminder for [reminder details] at [time]'."
LOGOUT_ANSWER = "To logout, go to the settings screen and tap 'Logout'."
DARK_MODE_ANSWER = "You can enable dark mode in the settings screen under 'Appearance'."

OFFICE_ENTRIES = [
    {
        "question": "How do I set a reminder",
        "answer": REMINDER_ANSWER,
        "keywords": ["set reminder", "remind me"],
    },
    {
        "question": "How do I logout",
        "answer": LOGOUT_ANSWER,
        "keywords": ["logout", "sign out", "log out"],
    },
    {
        "question": "How do I enable dark mode",
        "answer": DARK_MODE_ANSWER,
        "keywords": ["dark mode", "night mode", "theme"],
    },
]


class FakeAI:
    name = "fake"

    def __init__(self, reply: Optional[str] = "X", configured: bool = True, error: Optional[Exception] = None,
                 delay: float = 0.0) -> None:
        self.reply = reply
        self.configured = configured
        self.error = error
        self.delay = delay
        self.calls: List[dict] = []

    def is_configured(self) -> bool:
        return self.configured

    def complete(self, system_prompt, history, message):
        self.calls.append({"system_prompt": system_prompt, "history": list(history), "message": message})
        if self.delay:
            time.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def office_kb() -> KnowledgeBase:
    return KnowledgeBase.load(OFFICE_ENTRIES)


@pytest.fixture
def responder(office_kb) -> ChatResponder:
    return ChatResponder(office_kb)


@pytest.fixture
def shipped_kb_path() -> Path:
    return DATA_DIR / "knowledge_base.jsonl"
