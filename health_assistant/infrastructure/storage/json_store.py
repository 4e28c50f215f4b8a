import json
import os
import threading
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional
from uuid import uuid4

from health_assistant.config.settings import settings
from health_assistant.domain.chat_log import ChatLog, ChatLogPage, ChatLogStore
from health_assistant.domain.exceptions import StoreError


def _to_iso(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _from_iso(value: str) -> datetime:
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def new_log_id() -> str:
    return f"log-{uuid4().hex}"


class JsonChatLogStore(ChatLogStore):
    """以 JSON lines 形式保存在 <root>/chat_logs/logs.jsonl 的聊天日志。"""

    def __init__(self, root: str | Path | None = None):
        self._root = Path(root or settings.storage_root).resolve()
        self._log_root = self._root / "chat_logs"
        self._log_root.mkdir(parents=True, exist_ok=True)
        self._path = self._log_root / "logs.jsonl"
        self._lock = threading.Lock()

    def add(self, log: ChatLog) -> None:
        payload = asdict(log)
        payload["created_at"] = _to_iso(log.created_at)
        try:
            line = json.dumps(payload, ensure_ascii=False)
            with self._lock, self._path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except (OSError, TypeError, ValueError) as e:
            raise StoreError(code="STORE_WRITE_ERROR", message=str(e), http_status=500)

    def get(self, log_id: str) -> ChatLog:
        for log in self._read_all():
            if log.id == log_id:
                return log
        raise StoreError(code="CHAT_LOG_NOT_FOUND", message="Chat log not found", http_status=404)

    def list(self, page: int = 1, limit: int = 50, session_id: Optional[str] = None) -> ChatLogPage:
        page = max(int(page), 1)
        limit = max(int(limit), 1)
        items = [log for log in self._read_all() if session_id is None or log.session_id == session_id]
        items.sort(key=lambda log: log.created_at, reverse=True)
        start = (page - 1) * limit
        return ChatLogPage(items=items[start:start + limit], total=len(items), page=page, limit=limit)

    def list_by_session(self, session_id: str) -> List[ChatLog]:
        items = [log for log in self._read_all() if log.session_id == session_id]
        items.sort(key=lambda log: log.created_at)
        return items

    def list_by_user(self, user_id: str, limit: Optional[int] = None) -> List[ChatLog]:
        items = [log for log in self._read_all() if log.user_id == user_id]
        items.sort(key=lambda log: log.created_at, reverse=True)
        return items[:limit] if limit else items

    def delete(self, log_id: str) -> None:
        with self._lock:
            logs = self._read_all()
            remaining = [log for log in logs if log.id != log_id]
            if len(remaining) == len(logs):
                raise StoreError(code="CHAT_LOG_NOT_FOUND", message="Chat log not found", http_status=404)
            self._rewrite(remaining)

    def count_sessions(self, user_id: str) -> int:
        return len({log.session_id for log in self._read_all() if log.user_id == user_id})

    def has_session(self, session_id: str, user_id: Optional[str] = None) -> bool:
        return any(
            log.session_id == session_id and (user_id is None or log.user_id == user_id)
            for log in self._read_all()
        )

    def _read_all(self) -> List[ChatLog]:
        items: List[ChatLog] = []
        if not self._path.exists():
            return items
        try:
            raw_lines = self._path.read_bytes().splitlines()
        except OSError as e:
            raise StoreError(code="STORE_READ_ERROR", message=str(e), http_status=500)
        for raw in raw_lines:
            if not raw.strip():
                continue
            try:
                items.append(self._to_log(json.loads(raw.decode("utf-8"))))
            except (ValueError, KeyError, TypeError):
                # 中断的追加写入留下的残行（含非法 UTF-8），跳过
                continue
        return items

    def _rewrite(self, logs: List[ChatLog]) -> None:
        tmp_path = self._log_root / f"logs.{uuid4().hex}.jsonl.tmp"
        lines = []
        for log in logs:
            payload = asdict(log)
            payload["created_at"] = _to_iso(log.created_at)
            lines.append(json.dumps(payload, ensure_ascii=False))
        try:
            tmp_path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")
            os.replace(tmp_path, self._path)
        except OSError as e:
            raise StoreError(code="STORE_WRITE_ERROR", message=str(e), http_status=500)

    def _to_log(self, data: Dict[str, Any]) -> ChatLog:
        confidence = data.get("confidence")
        return ChatLog(
            id=data["id"],
            session_id=data["session_id"],
            user_message=data.get("user_message") or "",
            bot_response=data.get("bot_response") or "",
            created_at=_from_iso(data["created_at"]),
            user_id=data.get("user_id"),
            intent=data.get("intent"),
            confidence=float(confidence) if confidence is not None else None,
            language=data.get("language") or "en",
            meta=data.get("meta") or {},
        )
