from health_assistant.assistant.intents import extract_intent, generate_suggestions


def test_intent_rules():
    assert extract_intent("I have a FEVER") == "symptom.fever"
    assert extract_intent("my temperature is high") == "symptom.fever"
    assert extract_intent("dry cough since monday") == "symptom.respiratory"
    assert extract_intent("I caught a cold") == "symptom.respiratory"
    assert extract_intent("pain in my knee") == "symptom.headache"
    assert extract_intent("nausea after lunch") == "symptom.digestive"
    assert extract_intent("I want to schedule a visit") == "appointment.request"
    assert extract_intent("can I ask something") == "general.question"
    assert extract_intent("is sleep important") == "general.health_inquiry"


def test_intent_first_rule_wins():
    assert extract_intent("fever and a headache") == "symptom.fever"
    assert extract_intent("headache and a cough") == "symptom.respiratory"


def test_suggestions_from_response_and_message():
    suggestions = generate_suggestions("I have a fever", "Please see a doctor soon.")
    assert suggestions == [
        "Book an appointment with our healthcare provider",
        "Monitor your temperature regularly",
        "Stay hydrated and rest",
    ]


def test_suggestions_accumulate_across_rules():
    suggestions = generate_suggestions("cough and headache", "Rest well.")
    assert suggestions == ["Drink warm fluids", "Get adequate rest", "Rest in a quiet, dark room", "Stay hydrated"]


def test_default_suggestions():
    assert generate_suggestions("is sleep important", "Yes, it is.") == [
        "Monitor your symptoms",
        "Consult a healthcare professional if symptoms persist",
    ]
