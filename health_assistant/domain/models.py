"""统一的对话数据模型。

这里有两类结构：

- Provider 层模型：ChatMessage、CompletionRequest、Completion。各厂商适配器
  负责在这些模型与厂商 JSON 之间转换。
- 流水线层模型：ChatRequest（校验后的用户输入）与 ChatResult（带意图、
  置信度、建议的统一回答），供聊天接口使用。
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional

from health_assistant.domain.exceptions import ValidationError


Role = Literal["system", "user", "assistant"]

MAX_MESSAGE_LENGTH = 2000


@dataclass
class ChatMessage:
    """发送给 Provider 的单条消息。"""

    role: Role
    content: str


@dataclass
class CompletionRequest:
    """一次完整的对话补全调用。

    - provider: 逻辑 Provider 名称，如 "groq"。
    - model: 厂商模型 ID，已从配置解析。
    - messages: 系统提示词在前，用户消息在后。
    """

    provider: str
    model: str
    messages: List[ChatMessage]
    temperature: float = 0.7
    max_tokens: int = 500


@dataclass
class CompletionUsage:
    """统一格式的 token 用量。"""

    prompt_tokens: int
    completion_tokens: int
    total_tokens: int


@dataclass
class Completion:
    """解析后的 Provider 响应。

    ``text`` 为第一个候选的内容；Provider 没有返回可用结果时为 None。
    """

    provider: str
    model: str
    text: Optional[str]
    finish_reason: Optional[str] = None
    usage: Optional[CompletionUsage] = None
    raw: Optional[dict] = None


@dataclass(frozen=True)
class ChatRequest:
    """校验后的聊天输入：去除首尾空白的消息与会话 ID。"""

    message: str
    session_id: str

    @classmethod
    def create(
        cls,
        message: Any,
        session_id: Any,
        max_length: int = MAX_MESSAGE_LENGTH,
    ) -> "ChatRequest":
        """在调用任何 Provider 之前校验原始输入。"""

        if not message or not session_id or not isinstance(session_id, str) or not session_id.strip():
            raise ValidationError(code="MISSING_FIELDS", message="Please provide message and sessionId")
        if not isinstance(message, str) or not message.strip():
            raise ValidationError(code="INVALID_MESSAGE", message="Message must be a non-empty string")
        if len(message) > max_length:
            raise ValidationError(
                code="MESSAGE_TOO_LONG",
                message=f"Message is too long. Please keep it under {max_length} characters.",
                max_length=max_length,
            )
        return cls(message=message.strip(), session_id=session_id)


@dataclass(frozen=True)
class ChatResult:
    """与 Provider 无关的统一回答。

    - response: 展示给用户的文本。
    - intent: 粗粒度话题标签，如 "symptom.fever"。
    - confidence: 置信度，取值 [0, 1]。
    - suggestions: 有序的简短建议。
    - provider_tag: "openai"、"groq"、"gemini" 或 "mock-enhanced"。
    """

    response: str
    intent: str
    confidence: float
    suggestions: tuple = field(default_factory=tuple)
    provider_tag: str = "mock-enhanced"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "response": self.response,
            "intent": self.intent,
            "confidence": self.confidence,
            "suggestions": list(self.suggestions),
            "model": self.provider_tag,
        }


@dataclass(frozen=True)
class LiveAttempt:
    """单次在线 Provider 调用的结果：要么有值，要么有错误。"""

    value: Optional[ChatResult] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None

    @classmethod
    def success(cls, value: ChatResult) -> "LiveAttempt":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "LiveAttempt":
        return cls(error=error)

    def unwrap(self) -> ChatResult:
        if self.error is not None:
            raise self.error
        if self.value is None:
            raise ValueError("empty live attempt")
        return self.value
