"""配置管理。

配置只在启动时加载一次，来源依次为环境变量、``.env`` 文件和可选的
``config.yaml``。生成的对象不可变：流水线组件通过构造参数接收它，
自身不再读取进程环境变量。
"""

import os
import warnings
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """如果存在 config.yaml，则从中加载配置。"""
    candidates = []
    explicit = os.getenv("HEALTH_ASSISTANT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """健康助手的全局配置。"""

    # ---- Provider 选择 ----
    ai_provider: str = Field(
        default="openai",
        description="Provider 名称：openai、groq、gemini，或 mock/fallback 使用预置回答",
    )

    # OpenAI
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API 密钥")
    openai_model: str = Field(default="gpt-3.5-turbo")
    openai_base_url: str = Field(default="https://api.openai.com/v1")

    # Groq（兼容 OpenAI 协议）
    groq_api_key: Optional[str] = Field(default=None, description="Groq API 密钥")
    groq_model: str = Field(default="llama-3.1-8b-instant")
    groq_base_url: str = Field(default="https://api.groq.com/openai/v1")

    # Google Gemini
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API 密钥")
    gemini_model: str = Field(default="gemini-1.5-flash")
    gemini_base_url: str = Field(default="https://generativelanguage.googleapis.com")

    http_timeout: float = Field(default=30.0, ge=1.0, description="HTTP 超时时间（秒）")
    max_message_length: int = Field(default=2000, ge=1, description="聊天消息最大长度")

    storage_root: str = Field(default=".storage", description="聊天日志存储根目录")
    log_dir: str = Field(default="logs", description="JSON 日志文件目录")
    log_redact_content: bool = Field(default=False, description="日志中截断消息内容")
    max_user_chat_logs: int = Field(default=100, ge=1, description="每个用户返回的历史记录条数")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("openai_api_key", "groq_api_key", "gemini_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("ai_provider", mode="before")
    @classmethod
    def normalize_provider(cls, v: Optional[str]) -> str:
        if not v or not str(v).strip():
            return "openai"
        return str(v).strip().lower()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
