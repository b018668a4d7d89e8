"""
ForgeAI agent proxy: a thin HTTP front for the Claude API.

The client only ever talks to POST /api/ai/agent with {"prompt": ...} and
receives {"text": ...}; failures carry {"error", "details"}.
"""

import anthropic
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from forgeai.config import get_api_key, load_config


class AgentRequest(BaseModel):
    prompt: str | None = None


def _error(status_code, error, details=None, **extra):
    content = {"error": error}
    if details:
        content["details"] = details
    content.update(extra)
    return JSONResponse(status_code=status_code, content=content)


def create_app(config=None, client_factory=None):
    """
    Build the proxy application.

    Args:
        config: Configuration dictionary (defaults to load_config())
        client_factory: Callable api_key -> Anthropic client, for tests

    Returns:
        FastAPI app
    """
    config = config or load_config()
    claude_config = config.get("claude", {}) or {}
    model = claude_config.get("model")
    max_tokens = claude_config.get("max_tokens", 4000)
    timeout = claude_config.get("timeout", 120)

    if client_factory is None:
        def client_factory(api_key):
            return anthropic.Anthropic(api_key=api_key, timeout=timeout)

    app = FastAPI(title="ForgeAI agent proxy")

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/api/ai/agent")
    def agent(request: AgentRequest):
        if not request.prompt:
            return _error(400, "Prompt is required")

        api_key = get_api_key(config)
        if not api_key:
            return _error(500, "API Key not configured on server")

        logger.info(f"Agent proxy request ({len(request.prompt)} chars) -> {model}")
        try:
            message = client_factory(api_key).messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=[{"role": "user", "content": request.prompt}],
            )
        except anthropic.AuthenticationError:
            return _error(400, "Invalid API Key. Please check your configuration.")
        except anthropic.RateLimitError:
            return _error(
                429,
                "Claude Usage Limit Exceeded",
                "The AI service is currently busy (Rate Limit). Please wait a moment and try again.",
            )
        except anthropic.APIError as exc:
            logger.error(f"Agent proxy error: {exc}")
            return _error(500, "Claude Agent Request Failed", str(exc), model=model)

        if getattr(message, "stop_reason", None) == "refusal":
            return _error(400, "Request blocked: refusal")

        text = message.content[0].text if message.content else ""
        return {"text": text}

    return app
