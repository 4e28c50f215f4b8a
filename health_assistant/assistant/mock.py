"""确定性的模拟回答。

当 Provider 配置为 ``mock``/``fallback`` 时使用，也是在线调用失败后的降级路径。
输入按顺序与 TEMPLATES 匹配，第一个关键词出现在小写消息中的模板给出回答。
这里不访问网络，同一条消息总是得到同一个 ChatResult。
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from health_assistant.assistant.intents import contains_any
from health_assistant.domain.models import ChatResult


MOCK_PROVIDER_TAG = "mock-enhanced"


@dataclass(frozen=True)
class TopicTemplate:
    """单个话题的预置回答。

    ``max_length`` 将模板限制在短消息上（问候语）。
    """

    topic: str
    keywords: Tuple[str, ...]
    response: str
    intent: str
    confidence: float
    suggestions: Tuple[str, ...]
    max_length: Optional[int] = None

    def matches(self, lowered: str) -> bool:
        if self.max_length is not None and len(lowered) >= self.max_length:
            return False
        return contains_any(lowered, self.keywords)

    def to_result(self) -> ChatResult:
        return ChatResult(
            response=self.response,
            intent=self.intent,
            confidence=self.confidence,
            suggestions=self.suggestions,
            provider_tag=MOCK_PROVIDER_TAG,
        )


FEVER = TopicTemplate(
    topic="fever",
    keywords=("fever", "temperature", "hot", "burning", "chills", "sweat"),
    response=(
        "I understand you have a fever. Here's what you should know:\n\n"
        "• Monitor your temperature regularly. Normal body temperature is around 98.6°F (37°C).\n"
        "• If your temperature goes above 102°F (39°C) or persists for more than 3 days, "
        "please visit the health centre immediately.\n"
        "• Stay hydrated by drinking plenty of water and clear fluids.\n"
        "• Rest is important to help your body fight the infection.\n"
        "• You can take paracetamol (acetaminophen) as directed, but avoid self-medicating with antibiotics.\n\n"
        "⚠️ **Important**: If you experience severe symptoms like difficulty breathing, chest pain, "
        "or confusion, seek immediate medical attention."
    ),
    intent="symptom.fever",
    confidence=0.75,
    suggestions=(
        "Monitor your temperature regularly",
        "Stay hydrated and rest",
        "Book an appointment if symptoms persist",
    ),
)

RESPIRATORY = TopicTemplate(
    topic="respiratory",
    keywords=(
        "cough", "cold", "sneeze", "breathing", "chest", "throat",
        "runny nose", "congestion", "wheezing",
    ),
    response=(
        "For cough and cold symptoms, here are some helpful tips:\n\n"
        "• Rest is crucial for recovery. Give your body time to heal.\n"
        "• Drink warm fluids like herbal tea, warm water with honey and lemon, or clear soups. "
        "This helps soothe the throat.\n"
        "• Avoid cold beverages and dairy products if they worsen your cough.\n"
        "• Use a humidifier or take steamy showers to help with congestion.\n"
        "• Gargle with warm salt water to soothe a sore throat.\n"
        "• Cover your mouth when coughing or sneezing to prevent spreading.\n\n"
        "If symptoms worsen, persist beyond a week, or you develop a high fever, "
        "please book an appointment with our healthcare provider."
    ),
    intent="symptom.respiratory",
    confidence=0.75,
    suggestions=(
        "Drink warm fluids and rest",
        "Use humidifier for congestion",
        "Book appointment if symptoms persist",
    ),
)

HEADACHE = TopicTemplate(
    topic="headache",
    keywords=(
        "headache", "head pain", "migraine", "head hurts", "dizzy",
        "dizziness", "pain in head",
    ),
    response=(
        "Headaches can have various causes. Here's what may help:\n\n"
        "• Rest in a quiet, dark room to reduce stimulation.\n"
        "• Stay hydrated - dehydration can cause headaches.\n"
        "• Apply a cold or warm compress to your forehead or neck.\n"
        "• Avoid triggers like bright lights, loud noises, or strong smells.\n"
        "• Practice relaxation techniques like deep breathing.\n"
        "• Ensure you're getting adequate sleep.\n\n"
        "⚠️ **Seek immediate medical attention if**:\n"
        "• The pain is severe and sudden\n"
        "• Accompanied by fever, stiff neck, or vision changes\n"
        "• Headache after a head injury\n"
        "• Worsening headache that doesn't respond to usual remedies"
    ),
    intent="symptom.headache",
    confidence=0.75,
    suggestions=(
        "Rest in a quiet, dark room",
        "Stay hydrated",
        "Consult doctor if pain is severe",
    ),
)

DIGESTIVE = TopicTemplate(
    topic="digestive",
    keywords=(
        "stomach", "digestive", "nausea", "vomit", "diarrhea", "belly",
        "abdominal", "indigestion", "bloating", "constipation", "loose motion", "gas",
    ),
    response=(
        "For stomach and digestive issues:\n\n"
        "• Eat light, easily digestible foods like bananas, rice, applesauce, and toast (BRAT diet).\n"
        "• Stay hydrated with clean water, oral rehydration solutions, or clear broths.\n"
        "• Avoid spicy, oily, fried, or heavy foods until symptoms improve.\n"
        "• Avoid dairy products if you have diarrhea.\n"
        "• Get plenty of rest.\n"
        "• Wash your hands frequently to prevent spreading if it's infectious.\n\n"
        "⚠️ **Seek medical attention if**:\n"
        "• Symptoms persist for more than 2-3 days\n"
        "• You see blood in vomit or stool\n"
        "• Severe dehydration (dry mouth, dizziness, decreased urination)\n"
        "• Severe abdominal pain"
    ),
    intent="symptom.digestive",
    confidence=0.75,
    suggestions=(
        "Eat light, digestible foods",
        "Stay hydrated",
        "Consult doctor if symptoms persist",
    ),
)

APPOINTMENT = TopicTemplate(
    topic="appointment",
    keywords=("appointment", "book", "schedule"),
    response=(
        "I can help you book an appointment with our healthcare provider. To schedule an appointment:\n\n"
        '1. Click on the "Book Appointment" option in the menu\n'
        "2. Fill in your details: patient name, age, gender, contact information\n"
        "3. Select your preferred date and time\n"
        "4. Describe your symptoms or reason for the visit\n"
        "5. Submit the form\n\n"
        "Our team will contact you to confirm the appointment details. If you need urgent medical care, "
        "please visit the health centre directly or call our emergency number."
    ),
    intent="appointment.request",
    confidence=0.80,
    suggestions=(
        "Book an appointment through the website",
        "Visit health centre for urgent care",
    ),
)

PAIN = TopicTemplate(
    topic="pain",
    keywords=("pain", "hurt", "ache", "sore", "discomfort"),
    response=(
        "I understand you're experiencing pain or discomfort. Here's some general guidance:\n\n"
        "• **Rest and Protect**: Avoid activities that worsen the pain\n"
        "• **Ice or Heat**: Apply ice packs for acute pain/swelling, or heat for muscle stiffness\n"
        "• **Over-the-counter relief**: Pain relievers like paracetamol or ibuprofen "
        "(follow package instructions)\n"
        "• **Monitor the pain**: Note when it started, what makes it better/worse, and its intensity\n"
        "• **Stay hydrated**: Dehydration can sometimes cause pain\n\n"
        "⚠️ **Seek immediate medical attention if**:\n"
        "• Pain is severe or sudden\n"
        "• Pain persists for more than a few days\n"
        "• Accompanied by fever, swelling, or other concerning symptoms\n"
        "• Pain after an injury\n\n"
        "I recommend booking an appointment with our healthcare provider for a proper evaluation. "
        'You can use the "Book Appointment" feature in the menu.'
    ),
    intent="symptom.pain",
    confidence=0.70,
    suggestions=(
        "Rest and avoid activities that worsen pain",
        "Book an appointment for proper evaluation",
        "Seek immediate care if pain is severe",
    ),
)

FATIGUE = TopicTemplate(
    topic="fatigue",
    keywords=("tired", "fatigue", "weak", "weakness", "exhausted", "energy"),
    response=(
        "Feeling tired or weak can have various causes. Here are some helpful tips:\n\n"
        "• **Rest**: Ensure you're getting adequate sleep (7-9 hours for adults)\n"
        "• **Hydration**: Drink plenty of water throughout the day\n"
        "• **Nutrition**: Eat balanced meals with adequate iron, vitamins, and protein\n"
        "• **Physical activity**: Light exercise can help boost energy (if fatigue is not due to illness)\n"
        "• **Stress management**: High stress can cause fatigue\n"
        "• **Avoid overexertion**: Don't push yourself too hard\n\n"
        "⚠️ **Consult a healthcare provider if**:\n"
        "• Fatigue persists for more than 2 weeks\n"
        "• Accompanied by other symptoms like fever, weight loss, or pain\n"
        "• Interferes with daily activities\n"
        "• Sudden onset of severe fatigue\n\n"
        "I recommend booking an appointment to rule out any underlying health conditions."
    ),
    intent="symptom.fatigue",
    confidence=0.70,
    suggestions=(
        "Get adequate rest and sleep",
        "Stay hydrated and eat balanced meals",
        "Book an appointment if fatigue persists",
    ),
)

SKIN = TopicTemplate(
    topic="skin",
    keywords=("rash", "skin", "itch", "red", "bump", "pimple"),
    response=(
        "For skin concerns, here's some general guidance:\n\n"
        "• **Keep it clean**: Gently clean the affected area with mild soap and water\n"
        "• **Avoid scratching**: This can worsen irritation and lead to infection\n"
        "• **Moisturize**: Use gentle, fragrance-free moisturizers for dry skin\n"
        "• **Protect from sun**: Use sunscreen and cover exposed areas if sensitive\n"
        "• **Avoid harsh chemicals**: Use mild, hypoallergenic products\n\n"
        "⚠️ **See a healthcare provider if**:\n"
        "• Rash spreads rapidly or covers large areas\n"
        "• Accompanied by fever or other symptoms\n"
        "• Severe itching or pain\n"
        "• Signs of infection (pus, increased redness, warmth)\n"
        "• Rash doesn't improve after a few days\n\n"
        "I recommend booking an appointment for a proper diagnosis and treatment plan."
    ),
    intent="symptom.skin",
    confidence=0.70,
    suggestions=(
        "Keep affected area clean and avoid scratching",
        "Book an appointment for proper diagnosis",
        "Seek care if rash spreads or worsens",
    ),
)

GREETING = TopicTemplate(
    topic="greeting",
    keywords=("hi", "hello", "hey", "help", "what", "how"),
    response=(
        "Hello! I'm your health assistant. I'm here to help with:\n\n"
        "• General health information and guidance\n"
        "• Understanding symptoms\n"
        "• When to seek medical attention\n"
        "• Basic wellness advice\n"
        "• Booking appointments\n\n"
        "Please feel free to describe your symptoms or ask any health-related questions. "
        "I'll do my best to provide helpful information.\n\n"
        "⚠️ **Important**: I provide general guidance only, not medical diagnosis. "
        "For proper diagnosis and treatment, please consult with our healthcare professionals."
    ),
    intent="greeting",
    confidence=0.80,
    suggestions=(
        "Describe your symptoms",
        "Ask health-related questions",
        "Book an appointment if needed",
    ),
    max_length=20,
)

TEMPLATES: Sequence[TopicTemplate] = (
    FEVER,
    RESPIRATORY,
    HEADACHE,
    DIGESTIVE,
    APPOINTMENT,
    PAIN,
    FATIGUE,
    SKIN,
    GREETING,
)

GENERIC_INTENT = "general.health_inquiry"
GENERIC_CONFIDENCE = 0.65
GENERIC_SUGGESTIONS = (
    "Describe your symptoms in detail",
    "Book an appointment for proper diagnosis",
    "Consult healthcare professional for personalized advice",
)
GENERIC_RESPONSE = (
    "Thank you for your question. I understand you're looking for health information regarding: "
    '"{message}".\n\n'
    "While I provide general health guidance, I'm currently running in a limited mode. "
    "For the best assistance:\n\n"
    "**I can help you with**:\n"
    "• General health information and symptom guidance\n"
    "• Advice on when to seek medical attention\n"
    "• Information about booking appointments\n"
    "• Basic wellness tips\n\n"
    "**To get personalized help**:\n"
    '• Book an appointment with our healthcare provider through the "Book Appointment" menu\n'
    "• Describe your symptoms in detail for better guidance\n"
    "• For emergencies, visit the health centre immediately\n\n"
    "⚠️ **Important**: For proper medical diagnosis and treatment, please consult with our "
    "healthcare professionals. I provide general information only.\n\n"
    "**You can ask me about**:\n"
    "• Fever, cough, cold, headaches\n"
    "• Stomach issues, digestive problems\n"
    "• Pain, fatigue, skin concerns\n"
    "• General health questions\n\n"
    "Feel free to ask more specific questions about your symptoms!"
)


def match_template(user_message: str) -> Optional[TopicTemplate]:
    lowered = user_message.lower().strip()
    for template in TEMPLATES:
        if template.matches(lowered):
            return template
    return None


def generate_mock_response(user_message: str) -> ChatResult:
    """根据预置模板表给出回答。"""

    template = match_template(user_message)
    if template is not None:
        return template.to_result()
    return ChatResult(
        response=GENERIC_RESPONSE.format(message=user_message),
        intent=GENERIC_INTENT,
        confidence=GENERIC_CONFIDENCE,
        suggestions=GENERIC_SUGGESTIONS,
        provider_tag=MOCK_PROVIDER_TAG,
    )
