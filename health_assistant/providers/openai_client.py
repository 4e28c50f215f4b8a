"""OpenAI Provider 适配器。

本模块是统一模型与 OpenAI chat-completions 接口之间的转换层：

1. 接收 CompletionRequest。
2. 组装 {model, messages, temperature, max_tokens} 请求体。
3. 携带 Bearer token 发送 POST，将网络/HTTP 错误映射为 BusinessError 子类。
4. 把第一个 choice 解析为 Completion。

以上逻辑都在 OpenAICompatibleClient 中；同协议的厂商（Groq）只需替换
ProviderConfig。
"""

from typing import Any, Dict

import httpx

from health_assistant.config.settings import settings
from health_assistant.domain.exceptions import (
    ApiError,
    AuthenticationError,
    ConfigurationError,
    NetworkError,
    RateLimitError,
)
from health_assistant.domain.models import Completion, CompletionRequest, CompletionUsage
from health_assistant.infrastructure.logging.logger import logger
from health_assistant.providers.base import error_message_from
from health_assistant.providers.registry import OPENAI_CONFIG, ProviderConfig, read_setting, resolve_model


class OpenAICompatibleClient:
    """适用于任何提供 POST {base}/chat/completions 的 Provider。"""

    config: ProviderConfig = OPENAI_CONFIG
    prompt_style = "chat"

    def __init__(self, cfg=settings):
        # settings 提供 api key、模型覆盖、base url 与超时
        self._settings = cfg

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def model(self) -> str:
        return resolve_model(self._settings, self.config)

    @property
    def api_key(self):
        return read_setting(self._settings, self.config.key_setting)

    def complete(self, req: CompletionRequest) -> Completion:
        api_key = self.api_key
        if not api_key:
            raise ConfigurationError(
                code="MISSING_API_KEY",
                message=f"{self.config.key_env_var} is not configured in environment variables",
                provider=self.name,
            )
        payload = self._build_payload(req)
        base = read_setting(self._settings, self.config.base_url_setting) or self.config.base_url
        try:
            with httpx.Client(timeout=getattr(self._settings, "http_timeout", 30.0), trust_env=False) as client:
                resp = client.post(
                    f"{base.rstrip('/')}/chat/completions",
                    json=payload,
                    headers={
                        "Authorization": f"Bearer {api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), provider=self.name)
        if resp.status_code >= 400:
            self._raise_for_status(resp)
        return self._parse_response(resp.json(), req)

    def _build_payload(self, req: CompletionRequest) -> Dict[str, Any]:
        return {
            "model": req.model,
            "messages": [{"role": m.role, "content": m.content} for m in req.messages],
            "temperature": req.temperature,
            "max_tokens": req.max_tokens,
        }

    def _raise_for_status(self, resp: httpx.Response) -> None:
        status = resp.status_code
        message = error_message_from(resp, f"{self.config.display_name} API error: {status}")
        logger.error(
            f"{self.config.display_name} API error",
            extra={"extra": {"provider": self.name, "status": status, "error": message}},
        )
        if status == 429:
            # 额度用尽与限流都返回 429
            raise RateLimitError(code="RATE_LIMIT", message=message, http_status=429, provider=self.name)
        if status in (401, 403):
            raise AuthenticationError(
                code="INVALID_API_KEY", message=message, http_status=status, provider=self.name
            )
        raise ApiError(code="API_ERROR", message=message, http_status=status, provider=self.name)

    def _parse_response(self, data: Dict[str, Any], req: CompletionRequest) -> Completion:
        text = None
        finish_reason = None
        choices = data.get("choices") or []
        if choices:
            first = choices[0] or {}
            text = (first.get("message") or {}).get("content") or None
            finish_reason = first.get("finish_reason")
        usage_raw = data.get("usage") or {}
        usage = None
        if usage_raw:
            usage = CompletionUsage(
                prompt_tokens=usage_raw.get("prompt_tokens", 0),
                completion_tokens=usage_raw.get("completion_tokens", 0),
                total_tokens=usage_raw.get("total_tokens", 0),
            )
        return Completion(
            provider=self.name,
            model=req.model,
            text=text,
            finish_reason=finish_reason,
            usage=usage,
            raw=data,
        )


class OpenAIClient(OpenAICompatibleClient):
    """OpenAI chat-completions 客户端。"""

    config = OPENAI_CONFIG
