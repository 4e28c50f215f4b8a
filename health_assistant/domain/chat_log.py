from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Protocol


@dataclass
class ChatLog:
    id: str
    session_id: str
    user_message: str
    bot_response: str
    created_at: datetime
    user_id: Optional[str] = None
    intent: Optional[str] = None
    confidence: Optional[float] = None
    language: str = "en"
    meta: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ChatLogPage:
    items: List[ChatLog]
    total: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        if self.limit <= 0:
            return 0
        return (self.total + self.limit - 1) // self.limit


class ChatLogStore(Protocol):
    def add(self, log: ChatLog) -> None:
        ...

    def get(self, log_id: str) -> ChatLog:
        ...

    def list(self, page: int = 1, limit: int = 50, session_id: Optional[str] = None) -> ChatLogPage:
        ...

    def list_by_session(self, session_id: str) -> List[ChatLog]:
        ...

    def list_by_user(self, user_id: str, limit: Optional[int] = None) -> List[ChatLog]:
        ...

    def delete(self, log_id: str) -> None:
        ...

    def count_sessions(self, user_id: str) -> int:
        ...

    def has_session(self, session_id: str, user_id: Optional[str] = None) -> bool:
        ...
