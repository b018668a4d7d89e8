"""Client for the ForgeAI agent proxy endpoint."""

import httpx
from loguru import logger

from forgeai.errors import AgentTransportError
from forgeai.prompt_builder import build_agent_prompt

AGENT_PATH = "/api/ai/agent"
DEFAULT_BASE_URL = "http://localhost:8000"


class AgentClient:
    """Sends prompts to the LLM proxy and returns its text reply."""

    def __init__(self, base_url=DEFAULT_BASE_URL, timeout=120, transport=None):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the backend hosting the proxy route
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = (base_url or DEFAULT_BASE_URL).rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def send_prompt(self, prompt):
        """
        POST one prompt to the proxy.

        Returns:
            The agent's text reply

        Raises:
            AgentTransportError: If the proxy is unreachable, answers non-2xx,
                or answers without a text field
        """
        url = f"{self.base_url}{AGENT_PATH}"
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(url, json={"prompt": prompt})
        except httpx.HTTPError as exc:
            logger.error(f"Agent proxy unreachable at {url}: {exc}")
            raise AgentTransportError(f"Failed to communicate with AI agent: {exc}") from exc

        if response.status_code >= 400:
            error, details = self._error_fields(response)
            message = details or error or "Failed to communicate with AI agent"
            logger.error(f"Agent proxy returned {response.status_code}: {message}")
            raise AgentTransportError(message, status_code=response.status_code, details=details)

        try:
            data = response.json()
        except ValueError as exc:
            raise AgentTransportError(
                "Agent proxy returned a non-JSON body", status_code=response.status_code
            ) from exc

        text = data.get("text") if isinstance(data, dict) else None
        if not isinstance(text, str):
            raise AgentTransportError(
                "Agent proxy response is missing 'text'", status_code=response.status_code
            )
        return text

    @staticmethod
    def _error_fields(response):
        try:
            body = response.json()
        except ValueError:
            return response.text or None, None
        if not isinstance(body, dict):
            return None, None
        return body.get("error"), body.get("details")

    def generate_forge_response(self, user_input, profile, history, agent_state):
        """Build the full coaching prompt and send it to the agent."""
        prompt = build_agent_prompt(user_input, profile, history, agent_state)
        return self.send_prompt(prompt)
