from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from . import config, textgen
from .models import context_from_dict
from .planner import format_plan

logger = logging.getLogger(__name__)


app = FastAPI(title="Daily AI Bot", version="0.1")

# Get allowed origins from environment or use defaults for local development
allowed_origins = config.allowed_origins()
if not config.ALLOWED_ORIGINS:
    logger.warning("CORS: Using default localhost origins (set ALLOWED_ORIGINS for production)")

app.add_middleware(
    CORSMiddleware,
    allow_origins=allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class AssistantRequest(BaseModel):
    message: str = Field(description="Free-text prompt")
    # Left untyped; context_from_dict swaps malformed fields for defaults
    context: Optional[Any] = Field(default=None, description="{date, tasks, habits, journal}")


def _request_context(req: AssistantRequest):
    return context_from_dict(req.context if isinstance(req.context, dict) else None)


def _require_message(req: AssistantRequest) -> str:
    message = (req.message or "").strip()
    if not message:
        raise HTTPException(status_code=400, detail="empty_message")
    return message


@app.post("/api/ai")
def assistant_reply(req: AssistantRequest):
    message = _require_message(req)
    ctx = _request_context(req)
    logger.info(f"Assistant request for {ctx.date}: {len(ctx.tasks)} tasks, {len(ctx.habits)} habits")
    result = textgen.generate_reply(message, ctx, config.get_settings())
    # Provider failures still answer 200 with a deterministic plan
    return JSONResponse({"reply": result.reply, "source": result.source})


@app.post("/api/plan")
def deterministic_plan(req: AssistantRequest):
    message = _require_message(req)
    ctx = _request_context(req)
    return JSONResponse({"reply": format_plan(message, ctx), "source": "fallback"})


@app.get("/health")
def health():
    return JSONResponse({"ok": True, "llm": config.get_settings().llm_configured})


def main() -> None:
    import uvicorn

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run("daybot.api:app", host=config.DAYBOT_HOST, port=config.DAYBOT_PORT, reload=False)


if __name__ == "__main__":  # pragma: no cover
    main()
