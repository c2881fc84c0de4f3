"""
Ollama HTTP client.

Thin wrapper around the two Ollama endpoints Jester uses:
  - GET  /api/tags      (liveness check and model catalog)
  - POST /api/generate  (streaming generation)
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

import requests

from jester.core.errors import TransportError
from jester.core.models import OllamaModel

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "http://localhost:11434"


def normalize_endpoint(endpoint: str) -> str:
    """Strip exactly one trailing slash so paths can be appended."""
    if endpoint.endswith("/"):
        return endpoint[:-1]
    return endpoint


class OllamaClient:
    """
    Synchronous client for a local or remote Ollama server.

    All requests go through a single requests.Session.
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        timeout: float = 60,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = normalize_endpoint(endpoint or "")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return f"{self.endpoint}{path}"

    # ------------------------------------------------------------------
    # Catalog / health
    # ------------------------------------------------------------------
    def check_connection(self) -> bool:
        """Return True when /api/tags answers with a 2xx status."""
        if not self.endpoint:
            return False
        try:
            resp = self.session.get(
                self._url("/api/tags"),
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
            return resp.ok
        except requests.RequestException as e:
            # Expected whenever the daemon is not running
            logger.debug(f"Connection check failed: {e}")
            return False

    def fetch_models(self) -> List[OllamaModel]:
        """Return installed models, or an empty list on any failure."""
        if not self.endpoint:
            return []
        try:
            resp = self.session.get(self._url("/api/tags"), timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
            return [OllamaModel.from_dict(m) for m in (data.get("models") or [])]
        except (requests.RequestException, ValueError, AttributeError) as e:
            logger.warning(f"Fetch models failed: {e}")
            return []

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def stream_generate(self, model: str, prompt: str) -> Iterator[bytes]:
        """
        POST a streaming generation request and return its raw body chunks.

        The request is sent and its status checked before this returns;
        the body is then read lazily. Chunks are delivered as the network
        hands them over and may split JSON lines anywhere, so decoding is
        the caller's job.

        Raises:
            TransportError: On connection failure, timeout, non-2xx
                status, or a response without a body (the last two also
                while iterating)
        """
        url = self._url("/api/generate")
        payload: Dict[str, Any] = {"model": model, "prompt": prompt, "stream": True}

        try:
            resp = self.session.post(url, json=payload, timeout=self.timeout, stream=True)
        except requests.RequestException as e:
            logger.error(f"Ollama generate request failed: {e}")
            raise self._transport_error(e) from e

        if not resp.ok:
            resp.close()
            raise TransportError(
                self._status_message(resp.status_code, model, resp.reason),
                endpoint=self.endpoint,
                status_code=resp.status_code,
            )
        if resp.raw is None:
            resp.close()
            raise TransportError(
                "Ollama Error: No response body",
                endpoint=self.endpoint,
                status_code=resp.status_code,
            )
        return self._iter_body(resp)

    def _iter_body(self, resp: requests.Response) -> Iterator[bytes]:
        try:
            for chunk in resp.iter_content(chunk_size=None):
                if chunk:
                    yield chunk
        except requests.RequestException as e:
            logger.error(f"Ollama stream interrupted: {e}")
            raise self._transport_error(e) from e
        finally:
            resp.close()

    # ------------------------------------------------------------------
    # Error mapping
    # ------------------------------------------------------------------
    def _status_message(self, status_code: int, model: str, reason: Optional[str]) -> str:
        if status_code == 404:
            return f"Ollama Error: Model '{model}' not found. Pull it with: ollama pull {model}"
        return f"Ollama Error: HTTP {status_code} {reason or ''}".rstrip()

    def _transport_error(self, exc: Exception) -> TransportError:
        if isinstance(exc, requests.Timeout):
            msg = "Ollama Error: Request timed out. The model might be too slow or the daemon is overloaded."
        elif isinstance(exc, requests.ConnectionError):
            msg = f"Ollama Error: Cannot connect to Ollama at {self.endpoint}. Is the Ollama daemon running?"
        else:
            msg = f"Ollama Error: {exc}"
        return TransportError(msg, endpoint=self.endpoint)
