"""Google Gemini Provider 适配器。

Gemini 不使用 chat-completions 协议：

- URL: {base_url}/{version}/models/{model}:generateContent?key=<api_key>
- 请求体: 单个 content，文本为系统提示词加上用户问题，另附 generationConfig。

只在旧版接口上发布的模型：``v1`` 返回 404 时改用 ``v1beta`` 重试一次。
"""

from typing import Any, Dict, List

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
from health_assistant.providers.registry import GEMINI_CONFIG, read_setting, resolve_model


API_VERSIONS = ("v1", "v1beta")


class GeminiClient:
    """Gemini generateContent 客户端。"""

    name = "gemini"
    config = GEMINI_CONFIG
    prompt_style = "compact"

    def __init__(self, cfg=settings):
        self._settings = cfg

    @property
    def model(self) -> str:
        return resolve_model(self._settings, self.config)

    def complete(self, req: CompletionRequest) -> Completion:
        api_key = read_setting(self._settings, self.config.key_setting)
        if not api_key:
            raise ConfigurationError(
                code="MISSING_API_KEY",
                message=f"{self.config.key_env_var} is not configured in environment variables",
                provider=self.name,
            )
        payload = self._build_payload(req)
        base = read_setting(self._settings, self.config.base_url_setting) or self.config.base_url
        resp = None
        try:
            with httpx.Client(timeout=getattr(self._settings, "http_timeout", 30.0), trust_env=False) as client:
                for version in API_VERSIONS:
                    resp = client.post(
                        f"{base.rstrip('/')}/{version}/models/{req.model}:generateContent",
                        params={"key": api_key},
                        json=payload,
                        headers={"Content-Type": "application/json"},
                    )
                    if resp.status_code != 404:
                        break
                    logger.info(
                        "Gemini model not found, trying next API version",
                        extra={"extra": {"model": req.model, "version": version}},
                    )
        except httpx.RequestError as e:
            raise NetworkError(code="NETWORK_ERROR", message=str(e), provider=self.name)
        if resp.status_code >= 400:
            self._raise_for_status(resp)
        return self._parse_response(resp.json(), req)

    def _build_payload(self, req: CompletionRequest) -> Dict[str, Any]:
        system = "\n".join(m.content for m in req.messages if m.role == "system")
        question = "\n".join(m.content for m in req.messages if m.role != "system")
        text = f"{system}\n\nUser question: {question}" if system else question
        return {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "temperature": req.temperature,
                "maxOutputTokens": req.max_tokens,
            },
        }

    def _raise_for_status(self, resp: httpx.Response) -> None:
        status = resp.status_code
        message = error_message_from(
            resp, f"Gemini API error: {status}. Try using {self.config.default_model} model."
        )
        logger.error(
            "Gemini API error",
            extra={"extra": {"provider": self.name, "status": status, "error": message}},
        )
        if status == 429:
            raise RateLimitError(code="RATE_LIMIT", message=message, http_status=429, provider=self.name)
        if status in (401, 403):
            raise AuthenticationError(
                code="INVALID_API_KEY", message=message, http_status=status, provider=self.name
            )
        raise ApiError(code="API_ERROR", message=message, http_status=status, provider=self.name)

    def _parse_response(self, data: Dict[str, Any], req: CompletionRequest) -> Completion:
        text = None
        finish_reason = None
        candidates: List[Dict[str, Any]] = data.get("candidates") or []
        if candidates:
            first = candidates[0] or {}
            parts = (first.get("content") or {}).get("parts") or []
            if parts:
                text = (parts[0] or {}).get("text") or None
            finish_reason = first.get("finishReason")
        usage_raw = data.get("usageMetadata") or {}
        usage = None
        if usage_raw:
            usage = CompletionUsage(
                prompt_tokens=usage_raw.get("promptTokenCount", 0),
                completion_tokens=usage_raw.get("candidatesTokenCount", 0),
                total_tokens=usage_raw.get("totalTokenCount", 0),
            )
        return Completion(
            provider=self.name,
            model=req.model,
            text=text,
            finish_reason=finish_reason,
            usage=usage,
            raw=data,
        )
