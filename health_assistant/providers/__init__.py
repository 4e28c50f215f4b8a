"""LLM Provider 接入层。

- base: ProviderClient 协议。
- registry: 各 Provider 的接口地址、默认模型与密钥配置项。
- openai_client、groq_client、gemini_client: 各厂商适配器。
"""

from typing import Optional

from health_assistant.config.settings import settings
from health_assistant.domain.exceptions import ConfigurationError
from health_assistant.providers.base import ProviderClient
from health_assistant.providers.gemini_client import GeminiClient
from health_assistant.providers.groq_client import GroqClient
from health_assistant.providers.openai_client import OpenAIClient


_CLIENTS = {
    "openai": OpenAIClient,
    "groq": GroqClient,
    "gemini": GeminiClient,
}


def create_provider(name: Optional[str] = None, cfg=None) -> ProviderClient:
    """创建在线 Provider 客户端，未指定名称时使用配置中的 Provider。"""

    cfg = cfg if cfg is not None else settings
    provider_name = (name or getattr(cfg, "ai_provider", None) or "openai").strip().lower()
    client_cls = _CLIENTS.get(provider_name)
    if client_cls is None:
        raise ConfigurationError(
            code="UNSUPPORTED_PROVIDER",
            message=f"Unsupported AI provider: {provider_name}",
            provider=provider_name,
        )
    return client_cls(cfg)
