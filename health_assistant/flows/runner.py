"""回答流水线的高层入口。"""

from __future__ import annotations

from typing import Optional

from health_assistant.assistant.generator import ResponseGenerator
from health_assistant.config.settings import settings
from health_assistant.domain.models import ChatRequest, ChatResult

_generator: Optional[ResponseGenerator] = None


def get_default_generator() -> ResponseGenerator:
    """绑定全局配置的生成器（单例）。"""

    global _generator
    if _generator is None:
        _generator = ResponseGenerator(settings)
    return _generator


def generate_ai_response(
    message: str,
    session_id: str,
    *,
    generator: Optional[ResponseGenerator] = None,
) -> ChatResult:
    """校验消息并生成 ChatResult。

    Args:
        message: 用户输入，最多 ``max_message_length`` 个字符。
        session_id: 不透明的会话 ID。
        generator: 使用的流水线，默认为全局单例。

    Raises:
        ValidationError: 消息或会话 ID 不合法。
        AssistantError: 连模拟回答都无法生成。
    """

    generator = generator or get_default_generator()
    max_length = getattr(generator.settings, "max_message_length", None) or 2000
    request = ChatRequest.create(message, session_id, max_length=max_length)
    return generator.generate(request)
