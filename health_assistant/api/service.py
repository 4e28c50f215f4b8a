"""供 HTTP 层调用的服务门面。

对外提供返回可直接序列化为 JSON 的 dict 的函数/方法：
聊天、配置健康检查，以及供医生查看的聊天日志历史。
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from health_assistant.assistant.generator import ResponseGenerator
from health_assistant.assistant.selector import select_provider
from health_assistant.config.settings import settings
from health_assistant.domain.chat_log import ChatLog, ChatLogStore
from health_assistant.domain.exceptions import BusinessError, ValidationError
from health_assistant.flows.runner import generate_ai_response
from health_assistant.infrastructure.logging.logger import logger
from health_assistant.infrastructure.storage.json_store import JsonChatLogStore, new_log_id
from health_assistant.providers.registry import find_provider_config


class ChatService:
    """聊天接口逻辑：先生成回答，再保存本次对话。"""

    def __init__(
        self,
        store: Optional[ChatLogStore] = None,
        generator: Optional[ResponseGenerator] = None,
        cfg=None,
    ):
        self._settings = cfg if cfg is not None else (generator.settings if generator else settings)
        self._store = store if store is not None else JsonChatLogStore(root=self._settings.storage_root)
        self._generator = generator or ResponseGenerator(self._settings)

    def chat(
        self,
        message: Any,
        session_id: Any,
        user_id: Optional[str] = None,
        language: str = "en",
    ) -> Dict[str, Any]:
        """回答一条聊天消息。

        Args:
            message: 用户输入。
            session_id: 客户端生成的会话 ID。
            user_id: 已登录用户，匿名聊天为 None。
            language: 随日志保存的语言代码。

        Returns:
            ChatResult 的字段，外加 chatLogId 与 isNewSession。

        Raises:
            ValidationError: 消息或会话 ID 不合法。
            AssistantError: 完全无法生成回答。
        """
        result = generate_ai_response(message, session_id, generator=self._generator)

        is_new_session = False
        chat_log_id = None
        try:
            if user_id:
                is_new_session = not self._store.has_session(session_id, user_id=user_id)
            log = ChatLog(
                id=new_log_id(),
                session_id=session_id,
                user_id=user_id,
                user_message=message.strip(),
                bot_response=result.response,
                intent=result.intent,
                confidence=result.confidence,
                language=language or "en",
                created_at=datetime.now(timezone.utc),
                meta={"model": result.provider_tag},
            )
            self._store.add(log)
            chat_log_id = log.id
        except Exception as e:
            # 日志保存失败不影响返回已生成的回答
            logger.error(
                "Failed to save chat log",
                extra={"extra": {"session_id": session_id, "error": str(e), "code": getattr(e, "code", None)}},
            )

        payload = result.to_dict()
        payload["chatLogId"] = chat_log_id
        payload["isNewSession"] = is_new_session
        return payload

    def check_health(self) -> Dict[str, Any]:
        """报告 AI Provider 的配置状态。"""

        selection = select_provider(self._settings)
        if selection.is_mock:
            return {
                "status": "mock",
                "provider": selection.name,
                "hasApiKey": False,
                "model": None,
                "message": "Using mock/enhanced responses (no API key needed)",
                "helpUrl": None,
            }
        provider_cfg = find_provider_config(selection.name)
        help_url = provider_cfg.help_url if provider_cfg else "https://console.groq.com/keys"
        if not selection.is_supported:
            return {
                "status": "not_configured",
                "provider": selection.name,
                "hasApiKey": False,
                "model": None,
                "message": f"Unsupported AI provider: {selection.name}",
                "helpUrl": help_url,
            }
        return {
            "status": "configured" if selection.has_credential else "not_configured",
            "provider": selection.name,
            "hasApiKey": selection.has_credential,
            "model": selection.model,
            "message": (
                f"AI service is configured with {selection.name}"
                if selection.has_credential
                else f"Please set {selection.key_env_var} in your .env file"
            ),
            "helpUrl": help_url,
        }

    def save_log(
        self,
        session_id: str,
        user_message: str,
        bot_response: str,
        intent: Optional[str] = None,
        confidence: Optional[float] = None,
        language: str = "en",
        user_id: Optional[str] = None,
    ) -> Dict[str, Any]:
        if not session_id or not user_message or not bot_response:
            raise ValidationError(
                code="MISSING_FIELDS",
                message="Please provide sessionId, userMessage, and botResponse",
            )
        log = ChatLog(
            id=new_log_id(),
            session_id=session_id,
            user_id=user_id,
            user_message=user_message,
            bot_response=bot_response,
            intent=intent,
            confidence=confidence,
            language=language or "en",
            created_at=datetime.now(timezone.utc),
        )
        self._store.add(log)
        return serialize_log(log)

    def list_logs(self, page: int = 1, limit: int = 50, session_id: Optional[str] = None) -> Dict[str, Any]:
        result = self._store.list(page=page, limit=limit, session_id=session_id)
        return {
            "chatLogs": [serialize_log(log) for log in result.items],
            "totalPages": result.total_pages,
            "currentPage": result.page,
            "total": result.total,
        }

    def history(self, session_id: str) -> List[Dict[str, Any]]:
        """某个会话的全部对话，按时间正序。"""

        return [serialize_log(log) for log in self._store.list_by_session(session_id)]

    def user_history(self, user_id: str) -> List[Dict[str, Any]]:
        """某个用户最近的对话，按时间倒序。"""

        logs = self._store.list_by_user(user_id, limit=self._settings.max_user_chat_logs)
        return [serialize_log(log) for log in logs]

    def visit_count(self, user_id: str) -> int:
        return self._store.count_sessions(user_id)

    def delete_log(self, log_id: str) -> Dict[str, Any]:
        self._store.delete(log_id)
        return {"message": "Chat log removed"}


def serialize_log(log: ChatLog) -> Dict[str, Any]:
    return {
        "id": log.id,
        "sessionId": log.session_id,
        "user": log.user_id,
        "userMessage": log.user_message,
        "botResponse": log.bot_response,
        "intent": log.intent,
        "confidence": log.confidence,
        "language": log.language,
        "createdAt": log.created_at.astimezone(timezone.utc).isoformat().replace("+00:00", "Z"),
    }


_service: Optional[ChatService] = None


def get_default_service() -> ChatService:
    """绑定全局配置的服务（单例）。"""
    global _service
    if _service is None:
        _service = ChatService()
    return _service


def chat_with_ai(
    message: Any,
    session_id: Any,
    user_id: Optional[str] = None,
    language: str = "en",
) -> Dict[str, Any]:
    try:
        return get_default_service().chat(message, session_id, user_id=user_id, language=language)
    except BusinessError as e:
        logger.error(f"Chat failed: {e.message}", extra={"extra": {
            "session_id": session_id,
            "code": e.code,
        }})
        raise


def check_ai_health() -> Dict[str, Any]:
    return get_default_service().check_health()
