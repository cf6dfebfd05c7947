import logging
from dataclasses import dataclass
from typing import List, Optional

from openai import OpenAI

from . import config
from .models import PlanContext
from .planner import MISSING_TIME_LABEL, format_plan

logger = logging.getLogger(__name__)

ERROR_PREFIX = "I hit an error. Here's a simple plan instead.\n\n"

_PERSONA = (
    "You are a daily-routine copilot. Create pragmatic, time-aware plans, focus guidance, "
    "and next steps. Prefer concrete schedules with times, short bullets, and clear priorities. "
    "Keep tone warm, concise, and actionable."
)


class LLMError(Exception):
    """Base exception for model provider failures."""
    pass


class LLMUnavailableError(LLMError):
    """Raised when no model credentials are configured."""
    pass


@dataclass(frozen=True)
class ReplyResult:
    reply: str
    source: str  # llm | fallback | error


def build_system_prompt(ctx: PlanContext) -> str:
    tasks_text = "\n".join(
        f"- {t.time or MISSING_TIME_LABEL} {t.title}" + (f" ({t.duration_min}m)" if t.duration_min else "")
        for t in ctx.tasks
    )
    habits_text = ", ".join(f"{h.name}: {'done' if h.done else 'todo'}" for h in ctx.habits)
    return (
        f"{_PERSONA}\n\n"
        f"Context date: {ctx.date}\n"
        f"Tasks:\n{tasks_text}\n\n"
        f"Habits: {habits_text}\n\n"
        f"Journal:\n{ctx.journal}"
    )


def _client(settings: config.Settings) -> OpenAI:
    return OpenAI(api_key=settings.api_key, base_url=settings.base_url, timeout=settings.timeout)


def llm_reply(prompt: str, ctx: PlanContext, settings: Optional[config.Settings] = None) -> str:
    """Ask the chat-completions API for a plan.

    Raises:
        LLMUnavailableError: no API key configured
        LLMError: the provider failed or answered with empty content
    """
    settings = settings or config.get_settings()
    if not settings.llm_configured:
        raise LLMUnavailableError("OPENAI_API_KEY is not set")

    messages: List[dict] = [
        {"role": "system", "content": build_system_prompt(ctx)},
        {"role": "user", "content": prompt},
    ]
    try:
        resp = _client(settings).chat.completions.create(
            model=settings.model,
            messages=messages,
            temperature=settings.temperature,
        )
    except Exception as e:
        raise LLMError(f"{settings.model} request failed: {e}") from e

    text = ""
    if resp.choices:
        text = resp.choices[0].message.content or ""
    if not isinstance(text, str) or not text.strip():
        raise LLMError(f"{settings.model} returned an empty reply")
    return text.strip()


def generate_reply(prompt: str, ctx: PlanContext, settings: Optional[config.Settings] = None) -> ReplyResult:
    settings = settings or config.get_settings()
    try:
        return ReplyResult(reply=llm_reply(prompt, ctx, settings), source="llm")
    except LLMUnavailableError:
        logger.info("No model key configured - using deterministic plan")
        return ReplyResult(reply=format_plan(prompt, ctx), source="fallback")
    except LLMError as e:
        logger.error(f"Model call failed, falling back to deterministic plan: {e}")
        return ReplyResult(reply=ERROR_PREFIX + format_plan(prompt, ctx), source="error")
