import pytest

from responder.heuristics import DEFAULT_RULES, IntentRule, match_intent


def _text(name, refined=False):
    rule = next(r for r in DEFAULT_RULES if r.name == name)
    return rule.refined_response if refined else rule.response


@pytest.mark.parametrize(
    "message,name,refined",
    [
        ("hello there", "greeting", False),
        ("add a new todo", "task", True),
        ("show me my tasks", "task", False),
        ("please set a reminder for me", "reminder", True),
        ("show my reminders", "reminder", False),
        ("schedule a call with bob", "calendar", True),
        ("what's on my calendar", "calendar", False),
        ("help me", "help", False),
        ("thanks a lot", "thanks", False),
    ],
)
def test_rules(message, name, refined):
    match = match_intent(message)
    assert match is not None
    assert match.name == name
    assert match.refined is refined
    assert match.text == _text(name, refined)


def test_first_matching_rule_wins():
    # Contains greeting, task and reminder triggers; greeting is listed first.
    assert match_intent("hello, add a task and a reminder").name == "greeting"
    assert match_intent("add a task and a reminder").name == "task"


def test_triggers_are_substrings():
    assert match_intent("which one").name == "greeting"


@pytest.mark.parametrize("message", ["", "yo what's up", "1234 !!"])
def test_no_match(message):
    assert match_intent(message) is None


def test_custom_rules():
    rules = [IntentRule(name="lunch", triggers=("lunch",), response="Enjoy!")]
    assert match_intent("lunch time", rules).text == "Enjoy!"
    assert match_intent("hello", rules) is None
