from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .text import contains_any


@dataclass(frozen=True)
class IntentRule:
    name: str
    triggers: Tuple[str, ...]
    response: str
    refinements: Tuple[str, ...] = ()
    refined_response: Optional[str] = None


@dataclass(frozen=True)
class IntentMatch:
    name: str
    text: str
    refined: bool = False


# Checked top to bottom; the first rule with a matching trigger wins.
DEFAULT_RULES: Tuple[IntentRule, ...] = (
    IntentRule(
        name="greeting",
        triggers=("hello", "hi"),
        response=(
            "Hello! I'm your office assistant. I can help you with tasks, reminders, "
            "calendar events, and more. What would you like to do today?"
        ),
    ),
    IntentRule(
        name="task",
        triggers=("task", "todo"),
        refinements=("create", "add", "new"),
        refined_response=(
            "I'd be happy to help you create a task! Please provide the task title "
            "and any additional details like priority or due date."
        ),
        response=(
            "I can help you manage tasks. You can create new tasks, view existing ones, "
            "or mark them as complete. What would you like to do?"
        ),
    ),
    IntentRule(
        name="reminder",
        triggers=("reminder", "remind"),
        refinements=("set", "create", "add"),
        refined_response=(
            "I can help you set a reminder! Please tell me what you want to be "
            "reminded about and when (date and time)."
        ),
        response=(
            "I can help you manage reminders. You can set new reminders, view existing "
            "ones, or delete them. What would you like to do?"
        ),
    ),
    IntentRule(
        name="calendar",
        triggers=("calendar", "meeting", "schedule"),
        refinements=("create", "add", "schedule"),
        refined_response=(
            "I can help you schedule a meeting or calendar event! Please provide the "
            "event title, date, and time."
        ),
        response=(
            "I can help you manage your calendar. You can view events, create new ones, "
            "or check your schedule. What would you like to do?"
        ),
    ),
    IntentRule(
        name="help",
        triggers=("help", "what can you do"),
        response=(
            "I'm your office assistant! I can help you with:\n"
            "• Creating and managing tasks\n"
            "• Setting reminders\n"
            "• Scheduling calendar events\n"
            "• Answering questions\n"
            "• Providing daily briefings\n\n"
            "Just let me know what you need!"
        ),
    ),
    IntentRule(
        name="thanks",
        triggers=("thank",),
        response=(
            "You're welcome! I'm here to help make your workday more productive. "
            "Is there anything else you need assistance with?"
        ),
    ),
)

DEFAULT_RESPONSE = (
    "I understand you're asking about something. I can help you with tasks, reminders, "
    "calendar events, and general office assistance. Could you please be more specific "
    "about what you'd like me to help you with?"
)


def match_intent(message: str, rules: Sequence[IntentRule] = DEFAULT_RULES) -> Optional[IntentMatch]:
    for rule in rules:
        if not contains_any(message, rule.triggers):
            continue
        if rule.refined_response and contains_any(message, rule.refinements):
            return IntentMatch(name=rule.name, text=rule.refined_response, refined=True)
        return IntentMatch(name=rule.name, text=rule.response)
    return None
