"""
Fix generation: prompt assembly plus streamed decoding.
"""

import logging
from typing import Callable, Iterator, Optional

from jester.core.ollama_client import OllamaClient
from jester.core.prompts import build_fix_prompt
from jester.core.stream_decoder import iter_fragments

logger = logging.getLogger(__name__)

FragmentCallback = Callable[[str], None]


def open_fix_stream(
    client: OllamaClient,
    model: str,
    source: str,
    tests: str,
    error_log: str,
) -> Iterator[str]:
    """
    Send the repair request and return a lazy iterator of text fragments.

    The HTTP request is issued before this returns, so connection and
    status failures surface here; mid-stream failures surface while
    iterating. Both raise TransportError.
    """
    prompt = build_fix_prompt(source, tests, error_log)
    logger.info(f"Requesting fix from {client.endpoint} with model {model}")
    logger.debug(f"Prompt length: {len(prompt)} chars")
    return iter_fragments(client.stream_generate(model, prompt))


def generate_fix(
    endpoint: str,
    model: str,
    source: str,
    tests: str,
    error_log: str,
    on_fragment: Optional[FragmentCallback] = None,
    client: Optional[OllamaClient] = None,
) -> None:
    """
    Stream a fix for `source` from the Ollama server at `endpoint`.

    Runs the whole generation before returning, passing each response
    fragment to `on_fragment` in arrival order. Returns when the server
    reports done or closes the stream. Use open_fix_stream() to consume
    fragments lazily instead.

    Raises:
        TransportError: If the server is unreachable, answers with an
            error status, or drops the connection
    """
    client = client or OllamaClient(endpoint)
    for fragment in open_fix_stream(client, model, source, tests, error_log):
        if on_fragment is not None:
            on_fragment(fragment)
