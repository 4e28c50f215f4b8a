import tempfile
from datetime import datetime, timedelta, timezone

import pytest

from health_assistant.api.service import ChatService
from health_assistant.assistant.generator import ResponseGenerator
from health_assistant.domain.chat_log import ChatLog
from health_assistant.domain.exceptions import StoreError, ValidationError
from health_assistant.infrastructure.storage.json_store import JsonChatLogStore, new_log_id

BASE = datetime(2025, 1, 1, 9, 0, tzinfo=timezone.utc)


class SettingsStub:
    ai_provider = "mock"
    openai_api_key = None
    groq_api_key = None
    gemini_api_key = None
    http_timeout = 1.0
    max_message_length = 2000
    max_user_chat_logs = 2


class FailingStore:
    def has_session(self, session_id, user_id=None):
        return False

    def add(self, log):
        raise StoreError(code="STORE_WRITE_ERROR", message="disk full")


class UnreachableStore:
    def has_session(self, session_id, user_id=None):
        return False

    def add(self, log):
        raise OSError("connection to chat-log store lost")


def _no_network(name, cfg):
    raise AssertionError("provider must not be created in mock mode")


def _service(cfg=None, store=None):
    cfg = cfg or SettingsStub()
    generator = ResponseGenerator(cfg, provider_factory=_no_network)
    return ChatService(store=store, generator=generator, cfg=cfg)


@pytest.fixture
def service():
    with tempfile.TemporaryDirectory() as tmp:
        yield _service(store=JsonChatLogStore(root=tmp))


def test_chat_persists_exchange(service):
    payload = service.chat("  I have a fever  ", "s1", user_id="u1")
    assert payload["intent"] == "symptom.fever"
    assert payload["model"] == "mock-enhanced"
    assert payload["isNewSession"] is True
    assert payload["chatLogId"].startswith("log-")

    history = service.history("s1")
    assert len(history) == 1
    assert history[0]["userMessage"] == "I have a fever"
    assert history[0]["user"] == "u1"
    assert history[0]["createdAt"].endswith("Z")


def test_second_message_in_session_is_not_new(service):
    service.chat("hello", "s1", user_id="u1")
    payload = service.chat("I have a cough", "s1", user_id="u1")
    assert payload["isNewSession"] is False
    assert service.visit_count("u1") == 1


def test_anonymous_chat_is_never_a_new_session(service):
    assert service.chat("hello", "s1")["isNewSession"] is False


def test_chat_survives_store_failure():
    payload = _service(store=FailingStore()).chat("hello", "s1", user_id="u1")
    assert payload["intent"] == "greeting"
    assert payload["chatLogId"] is None


def test_chat_rejects_invalid_message(service):
    with pytest.raises(ValidationError):
        service.chat("   ", "s1")
    assert service.list_logs()["total"] == 0


def test_user_history_is_capped():
    with tempfile.TemporaryDirectory() as tmp:
        store = JsonChatLogStore(root=tmp)
        for minute, text in enumerate(("hello", "I have a fever", "I have a cough")):
            store.add(ChatLog(
                id=new_log_id(),
                session_id="s1",
                user_id="u1",
                user_message=text,
                bot_response="ok",
                created_at=BASE + timedelta(minutes=minute),
            ))
        history = _service(store=store).user_history("u1")
    assert [item["userMessage"] for item in history] == ["I have a cough", "I have a fever"]


def test_save_log_requires_fields(service):
    with pytest.raises(ValidationError) as exc:
        service.save_log("s1", "", "answer")
    assert exc.value.code == "MISSING_FIELDS"

    saved = service.save_log("s1", "question", "answer", intent="general.question")
    assert saved["intent"] == "general.question"
    assert saved["language"] == "en"


def test_list_and_delete_logs(service):
    service.save_log("s1", "q1", "a1")
    service.save_log("s2", "q2", "a2")
    listing = service.list_logs(page=1, limit=1)
    assert listing["total"] == 2
    assert listing["totalPages"] == 2
    assert listing["currentPage"] == 1

    log_id = listing["chatLogs"][0]["id"]
    assert service.delete_log(log_id) == {"message": "Chat log removed"}
    assert service.list_logs()["total"] == 1


def test_health_mock(service):
    health = service.check_health()
    assert health["status"] == "mock"
    assert health["hasApiKey"] is False


def test_health_configured():
    class Groq(SettingsStub):
        ai_provider = "groq"
        groq_api_key = "gsk-test-groq"

    with tempfile.TemporaryDirectory() as tmp:
        health = _service(Groq(), JsonChatLogStore(root=tmp)).check_health()
    assert health["status"] == "configured"
    assert health["model"] == "llama-3.1-8b-instant"
    assert health["helpUrl"] == "https://console.groq.com/keys"


def test_health_missing_key():
    class Gemini(SettingsStub):
        ai_provider = "gemini"

    with tempfile.TemporaryDirectory() as tmp:
        health = _service(Gemini(), JsonChatLogStore(root=tmp)).check_health()
    assert health["status"] == "not_configured"
    assert health["message"] == "Please set GEMINI_API_KEY in your .env file"
    assert health["helpUrl"] == "https://makersuite.google.com/app/apikey"


def test_health_unsupported_provider():
    class Unknown(SettingsStub):
        ai_provider = "claude"

    with tempfile.TemporaryDirectory() as tmp:
        health = _service(Unknown(), JsonChatLogStore(root=tmp)).check_health()
    assert health["status"] == "not_configured"
    assert health["message"] == "Unsupported AI provider: claude"


def test_health_reports_replacement_for_deprecated_model():
    class OldGemini(SettingsStub):
        ai_provider = "gemini"
        gemini_api_key = "AIza-test-key"
        gemini_model = "models/gemini-pro"

    with tempfile.TemporaryDirectory() as tmp:
        health = _service(OldGemini(), JsonChatLogStore(root=tmp)).check_health()
    assert health["model"] == "gemini-1.5-flash"


def test_chat_survives_non_business_store_error():
    payload = _service(store=UnreachableStore()).chat("I have a fever", "s1", user_id="u1")
    assert payload["intent"] == "symptom.fever"
    assert payload["chatLogId"] is None


def test_chat_survives_corrupt_log_file():
    with tempfile.TemporaryDirectory() as tmp:
        store = JsonChatLogStore(root=tmp)
        store._path.write_bytes(b'{"id": "x"}\n\xff\xfe broken\n')
        service = _service(store=store)
        payload = service.chat("I have a fever", "s1", user_id="u1")
        assert payload["isNewSession"] is True
        assert payload["chatLogId"] is not None
        assert [item["userMessage"] for item in service.history("s1")] == ["I have a fever"]
