"""回答生成。

ResponseGenerator 提供流水线组合的两个步骤：

- attempt_live_provider: 调用一次选定的 Provider，结果以 LiveAttempt 返回而不抛出，
  由调用方决定是否降级。
- mock_fallback: 确定性的模板回答。

``generate`` 执行组合后的流水线（见 flows.graph）。
"""

from typing import Callable, Optional

from health_assistant.assistant.intents import LIVE_CONFIDENCE, extract_intent, generate_suggestions
from health_assistant.assistant.mock import generate_mock_response
from health_assistant.assistant.selector import ProviderSelection, select_provider
from health_assistant.config.settings import settings
from health_assistant.domain.exceptions import ConfigurationError
from health_assistant.domain.models import (
    ChatMessage,
    ChatRequest,
    ChatResult,
    Completion,
    CompletionRequest,
    LiveAttempt,
)
from health_assistant.flows.graph import build_graph
from health_assistant.infrastructure.logging.logger import logger, mask_secret
from health_assistant.prompts import load_system_prompt
from health_assistant.providers import create_provider
from health_assistant.providers.base import ProviderClient
from health_assistant.providers.registry import DEFAULT_MAX_TOKENS, DEFAULT_TEMPERATURE, find_provider_config


APOLOGY = "I apologize, but I could not generate a response. Please try again."

ProviderFactory = Callable[[str, object], ProviderClient]
MockResponder = Callable[[str], ChatResult]


class ResponseGenerator:
    """为校验后的 ChatRequest 生成 ChatResult。"""

    def __init__(
        self,
        cfg=settings,
        provider_factory: Optional[ProviderFactory] = None,
        mock_responder: Optional[MockResponder] = None,
    ):
        self._settings = cfg
        self._provider_factory = provider_factory or create_provider
        self._mock_responder = mock_responder or generate_mock_response
        self._graph = None

    @property
    def settings(self):
        return self._settings

    def select(self) -> ProviderSelection:
        return select_provider(self._settings)

    def attempt_live_provider(self, request: ChatRequest, selection: ProviderSelection) -> LiveAttempt:
        try:
            if not selection.is_supported:
                raise ConfigurationError(
                    code="UNSUPPORTED_PROVIDER",
                    message=f"Unsupported AI provider: {selection.name}",
                    provider=selection.name,
                )
            client = self._provider_factory(selection.name, self._settings)
            completion = client.complete(self.build_request(client, request.message))
            return LiveAttempt.success(self.to_chat_result(completion, request.message))
        except Exception as exc:
            self._log_live_failure(exc, selection)
            return LiveAttempt.failure(exc)

    def mock_fallback(self, request: ChatRequest) -> ChatResult:
        return self._mock_responder(request.message)

    def generate(self, request: ChatRequest) -> ChatResult:
        if self._graph is None:
            self._graph = build_graph(self)
        return self._graph.invoke({"request": request})["result"]

    def build_request(self, client: ProviderClient, message: str) -> CompletionRequest:
        system_prompt = load_system_prompt(getattr(client, "prompt_style", "chat"))
        return CompletionRequest(
            provider=client.name,
            model=client.model,
            messages=[
                ChatMessage(role="system", content=system_prompt),
                ChatMessage(role="user", content=message),
            ],
            temperature=DEFAULT_TEMPERATURE,
            max_tokens=DEFAULT_MAX_TOKENS,
        )

    @staticmethod
    def to_chat_result(completion: Completion, message: str) -> ChatResult:
        text = completion.text or APOLOGY
        return ChatResult(
            response=text,
            intent=extract_intent(message),
            confidence=LIVE_CONFIDENCE,
            suggestions=tuple(generate_suggestions(message, text)),
            provider_tag=completion.provider,
        )

    def _log_live_failure(self, exc: Exception, selection: ProviderSelection) -> None:
        provider_cfg = find_provider_config(selection.name)
        api_key = getattr(self._settings, provider_cfg.key_setting, None) if provider_cfg else None
        logger.error(
            f"API call failed ({selection.name}), falling back to enhanced mock responses",
            extra={"extra": {
                "provider": selection.name,
                "error": str(exc),
                "error_type": type(exc).__name__,
                "has_api_key": selection.has_credential,
                "api_key_prefix": mask_secret(api_key),
            }},
        )
