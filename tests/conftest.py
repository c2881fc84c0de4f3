"""Shared fakes for Jester tests. No test talks to a real server."""

import json
from typing import Any, Dict, Iterable, List, Optional

import pytest
import requests


def ndjson(*records: Dict[str, Any]) -> bytes:
    """Encode records the way Ollama streams them: one JSON object per line."""
    return b"".join(json.dumps(r, ensure_ascii=False).encode("utf-8") + b"\n" for r in records)


def gen_record(text: str, done: bool = False) -> Dict[str, Any]:
    return {
        "model": "codellama:7b",
        "created_at": "2024-01-01T00:00:00Z",
        "response": text,
        "done": done,
    }


class FakeResponse:
    def __init__(
        self,
        status_code: int = 200,
        chunks: Iterable[bytes] = (),
        payload: Any = None,
        reason: str = "OK",
        raw: Any = object(),
        fail_after: Optional[int] = None,
    ):
        self.status_code = status_code
        self.reason = reason
        self.raw = raw
        self._chunks = list(chunks)
        self._payload = payload
        self._fail_after = fail_after
        self.closed = False

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def raise_for_status(self) -> None:
        if not self.ok:
            raise requests.HTTPError(f"{self.status_code} {self.reason}")

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload

    def iter_content(self, chunk_size=None):
        for i, chunk in enumerate(self._chunks):
            if self._fail_after is not None and i >= self._fail_after:
                raise requests.ConnectionError("Connection reset by peer")
            yield chunk

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """Stands in for requests.Session; records calls and replays responses."""

    def __init__(self, get_response=None, post_response=None):
        self.get_response = get_response
        self.post_response = post_response
        self.calls: List[Dict[str, Any]] = []

    def _reply(self, response):
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        self.calls.append({"method": "GET", "url": url, **kwargs})
        return self._reply(self.get_response)

    def post(self, url, **kwargs):
        self.calls.append({"method": "POST", "url": url, **kwargs})
        return self._reply(self.post_response)


TAGS_PAYLOAD = {
    "models": [
        {
            "name": "codellama:7b",
            "modified_at": "2024-01-01T00:00:00Z",
            "size": 3825819519,
            "digest": "abc123",
            "details": {
                "format": "gguf",
                "family": "llama",
                "families": None,
                "parameter_size": "7B",
                "quantization_level": "Q4_0",
            },
        },
        {
            "name": "qwen2.5-coder:14b",
            "modified_at": "2024-02-01T00:00:00Z",
            "size": 9000000000,
            "digest": "def456",
            "details": {
                "format": "gguf",
                "family": "qwen2",
                "families": ["qwen2"],
                "parameter_size": "14.8B",
                "quantization_level": "Q4_K_M",
            },
        },
    ]
}


@pytest.fixture
def tags_response():
    return FakeResponse(payload=TAGS_PAYLOAD)
