import pytest

from health_assistant.assistant.fallback import classify_error, translate_error
from health_assistant.assistant.selector import ProviderSelection
from health_assistant.domain.exceptions import ConfigurationError, ErrorKind, RateLimitError


@pytest.mark.parametrize(
    "message, kind",
    [
        ("OPENAI_API_KEY is not configured in environment variables", ErrorKind.AI_NOT_CONFIGURED),
        ("Missing API key", ErrorKind.AI_NOT_CONFIGURED),
        ("You exceeded your current quota", ErrorKind.RATE_LIMIT),
        ("Groq API error: 429", ErrorKind.RATE_LIMIT),
        ("rate limit reached", ErrorKind.RATE_LIMIT),
        ("Request failed with 401", ErrorKind.INVALID_API_KEY),
        ("unauthorized", ErrorKind.INVALID_API_KEY),
        ("connection reset by peer", ErrorKind.UNKNOWN_ERROR),
    ],
)
def test_classify_error(message, kind):
    assert classify_error(RuntimeError(message)) is kind


def test_classify_uses_business_error_message():
    err = RateLimitError(code="RATE_LIMIT", message="quota exhausted", http_status=429)
    assert classify_error(err) is ErrorKind.RATE_LIMIT


def test_translate_not_configured_carries_hint():
    selection = ProviderSelection(
        name="gemini",
        is_mock=False,
        is_supported=True,
        has_credential=False,
        help_url="https://makersuite.google.com/app/apikey",
    )
    err = translate_error(ConfigurationError(code="MISSING_API_KEY", message="not configured"), selection)
    assert err.kind is ErrorKind.AI_NOT_CONFIGURED
    assert "GEMINI_API_KEY" in err.message
    assert err.to_dict() == {
        "message": err.message,
        "errorCode": "AI_NOT_CONFIGURED",
        "hint": "Get API key from: https://makersuite.google.com/app/apikey",
    }


def test_translate_unknown_keeps_original_message():
    err = translate_error(RuntimeError("template table corrupted"))
    assert err.kind is ErrorKind.UNKNOWN_ERROR
    assert err.message == "template table corrupted"
    assert err.http_status == 500
