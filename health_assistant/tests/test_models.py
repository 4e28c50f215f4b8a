import pytest

from health_assistant.domain.exceptions import ValidationError
from health_assistant.domain.models import ChatRequest, ChatResult, LiveAttempt


def test_chat_request_trims_message():
    req = ChatRequest.create("  I have a cough  ", "s1")
    assert req.message == "I have a cough"
    assert req.session_id == "s1"


def test_chat_request_accepts_2000_characters():
    req = ChatRequest.create("a" * 2000, "s1")
    assert len(req.message) == 2000


def test_chat_request_rejects_2001_characters():
    with pytest.raises(ValidationError) as exc:
        ChatRequest.create("a" * 2001, "s1")
    assert exc.value.code == "MESSAGE_TOO_LONG"


@pytest.mark.parametrize("message", ["", None])
def test_chat_request_reports_missing_message(message):
    with pytest.raises(ValidationError) as exc:
        ChatRequest.create(message, "s1")
    assert exc.value.code == "MISSING_FIELDS"
    assert exc.value.message == "Please provide message and sessionId"


@pytest.mark.parametrize("message", ["   ", 42])
def test_chat_request_rejects_blank_or_non_string_message(message):
    with pytest.raises(ValidationError) as exc:
        ChatRequest.create(message, "s1")
    assert exc.value.code == "INVALID_MESSAGE"


def test_chat_request_requires_session():
    with pytest.raises(ValidationError) as exc:
        ChatRequest.create("hello", "")
    assert exc.value.code == "MISSING_FIELDS"


def test_chat_result_to_dict():
    result = ChatResult(
        response="ok",
        intent="greeting",
        confidence=0.8,
        suggestions=("a", "b"),
        provider_tag="groq",
    )
    assert result.to_dict() == {
        "response": "ok",
        "intent": "greeting",
        "confidence": 0.8,
        "suggestions": ["a", "b"],
        "model": "groq",
    }


def test_live_attempt():
    value = ChatResult(response="ok", intent="x", confidence=0.85)
    assert LiveAttempt.success(value).unwrap() is value
    failed = LiveAttempt.failure(RuntimeError("boom"))
    assert not failed.ok
    with pytest.raises(RuntimeError):
        failed.unwrap()
