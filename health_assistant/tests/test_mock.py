import pytest

from health_assistant.assistant.mock import MOCK_PROVIDER_TAG, generate_mock_response


@pytest.mark.parametrize(
    "message, intent, confidence",
    [
        ("I have had a fever since yesterday", "symptom.fever", 0.75),
        ("My TEMPERATURE keeps rising", "symptom.fever", 0.75),
        ("I have a cough", "symptom.respiratory", 0.75),
        ("I think I caught a cold", "symptom.respiratory", 0.75),
        ("terrible migraine today", "symptom.headache", 0.75),
        ("my stomach is upset", "symptom.digestive", 0.75),
        ("I need to book an appointment", "appointment.request", 0.80),
        ("my knee hurts when walking", "symptom.pain", 0.70),
        ("always tired lately", "symptom.fatigue", 0.70),
        ("a rash on my arm", "symptom.skin", 0.70),
        ("hello there", "greeting", 0.80),
    ],
)
def test_mock_templates(message, intent, confidence):
    result = generate_mock_response(message)
    assert result.intent == intent
    assert result.confidence == confidence
    assert result.provider_tag == MOCK_PROVIDER_TAG
    assert result.suggestions


def test_mock_fever_wins_over_headache():
    result = generate_mock_response("fever with a headache")
    assert result.intent == "symptom.fever"


def test_mock_headache_scenario():
    result = generate_mock_response("I have a bad headache and some pain")
    assert result.intent == "symptom.headache"
    assert result.confidence == 0.75
    assert "Rest in a quiet, dark room" in result.suggestions


def test_mock_greeting_requires_short_message():
    result = generate_mock_response("what should a balanced diet look like for someone my age")
    assert result.intent == "general.health_inquiry"


def test_mock_generic_response_quotes_message():
    result = generate_mock_response("Is vitamin D useful for adults?")
    assert result.intent == "general.health_inquiry"
    assert result.confidence == 0.65
    assert '"Is vitamin D useful for adults?"' in result.response
    assert result.suggestions[0] == "Describe your symptoms in detail"


def test_mock_is_deterministic():
    first = generate_mock_response("I have a cough")
    second = generate_mock_response("I have a cough")
    assert first == second
    assert first.to_dict() == second.to_dict()
