"""系统提示词加载。

提示词是 prompts/<locale>/ 下的纯文本文件。chat-completions 类 Provider
使用完整人设；单 content 的 Provider（Gemini）使用精简版，拼接在用户问题前。
"""

from functools import lru_cache
from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent

_PROMPT_FILES = {
    "chat": "health_assistant_system.md",
    "compact": "health_assistant_compact.md",
}


@lru_cache(maxsize=None)
def load_system_prompt(style: str = "chat", locale: str = "en") -> str:
    """按提示词风格与语言加载系统提示词。"""

    fname = PROMPTS_DIR / locale / _PROMPT_FILES[style]
    return fname.read_text(encoding="utf-8").strip()
