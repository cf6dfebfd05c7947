import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables from .env file
_env_path = Path(__file__).resolve().parents[1] / '.env'
if _env_path.exists():
    load_dotenv(_env_path)

# ==============================================================================
# AI MODEL CONFIGURATION
# ==============================================================================

# OpenAI (or any OpenAI-compatible endpoint). No key means deterministic plans only.
OPENAI_API_KEY: Optional[str] = os.getenv("OPENAI_API_KEY")
OPENAI_BASE_URL: Optional[str] = os.getenv("OPENAI_BASE_URL") or os.getenv("OPENAI_API_BASE")
OPENAI_MODEL: str = os.getenv("OPENAI_MODEL", "gpt-4o-mini")

# Model Settings
TEMPERATURE: float = float(os.getenv("TEMPERATURE", "0.4"))
LLM_TIMEOUT: float = float(os.getenv("LLM_TIMEOUT", "30"))

# ---------------------------------------------------------------------------
# HTTP service
# ---------------------------------------------------------------------------
DAYBOT_HOST: str = os.getenv("DAYBOT_HOST", "0.0.0.0")
DAYBOT_PORT: int = int(os.getenv("DAYBOT_PORT", "8000"))
DAYBOT_SERVER_URL: str = os.getenv("DAYBOT_SERVER_URL", "http://localhost:8000")
ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "")

_DEFAULT_ORIGINS = ["http://localhost:3000", "http://127.0.0.1:3000"]

# ---------------------------------------------------------------------------
# Local day file (CLI)
# ---------------------------------------------------------------------------
_DEF_STATE_FILENAME = "daybot_state.json"


def _resolve_default_state_path() -> str:
    base_dir = Path(__file__).resolve().parents[1]
    return str(base_dir / _DEF_STATE_FILENAME)


_state_env = os.getenv("DAYBOT_STATE_PATH")
if _state_env and _state_env.strip():
    STATE_PATH = os.path.abspath(_state_env)
else:
    STATE_PATH = _resolve_default_state_path()

LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() not in {"0", "false", "no", "off"}


# Lets a deployment keep a key in the environment but serve deterministic plans only.
LLM_ENABLED: bool = _env_flag("DAYBOT_LLM_ENABLED", True)


@dataclass(frozen=True)
class Settings:
    """Snapshot of the model settings handed to textgen."""
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    model: str = "gpt-4o-mini"
    temperature: float = 0.4
    timeout: float = 30.0

    @property
    def llm_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


def get_settings() -> Settings:
    return Settings(
        api_key=OPENAI_API_KEY if LLM_ENABLED else None,
        base_url=OPENAI_BASE_URL,
        model=OPENAI_MODEL,
        temperature=TEMPERATURE,
        timeout=LLM_TIMEOUT,
    )


def allowed_origins() -> List[str]:
    if ALLOWED_ORIGINS.strip():
        return [origin.strip() for origin in ALLOWED_ORIGINS.split(",") if origin.strip()]
    return list(_DEFAULT_ORIGINS)


def state_path() -> str:
    return STATE_PATH
