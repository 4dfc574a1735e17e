import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests


logger = logging.getLogger(__name__)


@dataclass
class WorkersAiConfig:
    account_id: str
    token: str
    base_url: str = "https://api.cloudflare.com/client/v4"
    timeout: float = 120.0


class WorkersAiClient:
    """Inference binding backed by the Cloudflare Workers AI REST API.

    ``run(model, inputs)`` mirrors the in-worker ``env.AI.run`` call: the
    inputs are posted as JSON and the ``result`` object of the response
    envelope is returned.
    """

    def __init__(self, config: WorkersAiConfig, session: Optional[requests.Session] = None) -> None:
        self.config = config
        self._session = session or requests.Session()

    def _endpoint(self, model: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/accounts/{self.config.account_id}/ai/run/{model}"

    def run(self, model: str, inputs: Dict[str, Any]) -> Dict[str, Any]:
        if not self.config.account_id or not self.config.token:
            raise ValueError("CLOUDFLARE_ACCOUNT_ID and CLOUDFLARE_API_TOKEN are required for Workers AI")
        headers = {
            "Authorization": f"Bearer {self.config.token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        resp = self._session.post(self._endpoint(model), headers=headers, json=inputs, timeout=self.config.timeout)
        if resp.status_code >= 400:
            raise RuntimeError(f"Workers AI error {resp.status_code}: {resp.text[:200]}")
        try:
            data = resp.json()
        except ValueError:
            raise RuntimeError(f"Non-JSON response from Workers AI: {resp.text[:200]}")

        if not isinstance(data, dict):
            raise RuntimeError(f"Unexpected Workers AI response: {str(data)[:200]}")
        if data.get("success") is False:
            errors = data.get("errors") or []
            detail = "; ".join(str(e.get("message", e)) if isinstance(e, dict) else str(e) for e in errors)
            raise RuntimeError(f"Workers AI request failed: {detail or 'unknown error'}")
        # The REST envelope wraps the model output under "result"
        result = data.get("result", data)
        return result if isinstance(result, dict) else {}
