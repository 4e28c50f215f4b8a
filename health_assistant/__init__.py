"""Health Assistant 顶层包。

健康门户症状咨询的 AI 回答生成：Provider 选择、在线 Provider 适配器、
作为降级路径的确定性模拟回答、错误分类以及聊天日志持久化。
"""

from health_assistant.api.service import ChatService, chat_with_ai, check_ai_health
from health_assistant.flows.runner import generate_ai_response

__all__ = ["ChatService", "chat_with_ai", "check_ai_health", "generate_ai_response"]
