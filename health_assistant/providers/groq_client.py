"""Groq Provider 适配器。

Groq 提供兼容 OpenAI 的接口：
- URL: {base_url}/chat/completions（base_url 以 /openai/v1 结尾）
- 鉴权: Authorization: Bearer <api_key>

与 OpenAI 相比只有接口地址、默认模型和密钥不同。
"""

from health_assistant.providers.openai_client import OpenAICompatibleClient
from health_assistant.providers.registry import GROQ_CONFIG


class GroqClient(OpenAICompatibleClient):
    """Groq chat-completions 客户端。"""

    config = GROQ_CONFIG
