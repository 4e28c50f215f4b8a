"""在线回答的关键词意图与建议提取。

规则按表中顺序匹配，先命中者生效，因此 INTENT_RULES 的顺序本身就是行为：
"fever and headache" 归为 fever。
"""

from typing import List, Sequence, Tuple


INTENT_RULES: Sequence[Tuple[str, Tuple[str, ...]]] = (
    ("symptom.fever", ("fever", "temperature")),
    ("symptom.respiratory", ("cough", "cold")),
    ("symptom.headache", ("headache", "pain")),
    ("symptom.digestive", ("stomach", "digestive", "nausea")),
    ("appointment.request", ("appointment", "book", "schedule")),
    ("general.question", ("question", "ask")),
)
DEFAULT_INTENT = "general.health_inquiry"

LIVE_CONFIDENCE = 0.85

BOOK_APPOINTMENT = "Book an appointment with our healthcare provider"

# (用户消息中的关键词, 命中时追加的建议)
SELF_CARE_RULES: Sequence[Tuple[Tuple[str, ...], Tuple[str, ...]]] = (
    (("fever", "temperature"), ("Monitor your temperature regularly", "Stay hydrated and rest")),
    (("cough", "cold"), ("Drink warm fluids", "Get adequate rest")),
    (("headache", "pain"), ("Rest in a quiet, dark room", "Stay hydrated")),
)
DEFAULT_SUGGESTIONS = (
    "Monitor your symptoms",
    "Consult a healthcare professional if symptoms persist",
)


def contains_any(text: str, keywords: Sequence[str]) -> bool:
    return any(k in text for k in keywords)


def extract_intent(user_message: str) -> str:
    """将用户消息归类为粗粒度话题标签。"""

    lowered = user_message.lower()
    for intent, keywords in INTENT_RULES:
        if contains_any(lowered, keywords):
            return intent
    return DEFAULT_INTENT


def generate_suggestions(user_message: str, ai_response: str) -> List[str]:
    lowered_message = user_message.lower()
    lowered_response = ai_response.lower()
    suggestions: List[str] = []

    if contains_any(lowered_response, ("doctor", "medical")):
        suggestions.append(BOOK_APPOINTMENT)
    for keywords, tips in SELF_CARE_RULES:
        if contains_any(lowered_message, keywords):
            suggestions.extend(tips)

    if not suggestions:
        suggestions.extend(DEFAULT_SUGGESTIONS)
    return suggestions
