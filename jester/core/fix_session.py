"""
Fix Session

Owns everything one user session shares between the CLI and the
generation pipeline: server connection, selected model, the three input
buffers and the streamed result. Only the active invocation writes to
`fix_result` and `is_fixing`; a second invocation is refused while one
is in flight.
"""

import logging
import time
from typing import Callable, List, Optional

from jester.core.code_extractor import extract_last_code_block
from jester.core.errors import (
    NoCodeBlockError,
    NotConnectedError,
    SessionBusyError,
    TransportError,
)
from jester.core.generation import FragmentCallback, open_fix_stream
from jester.core.models import FixState, OllamaModel
from jester.core.ollama_client import DEFAULT_ENDPOINT, OllamaClient

logger = logging.getLogger(__name__)

GENERATION_ERROR_NOTICE = "\n\nError generating fix. Please check your Ollama connection."


class FixSession:
    """
    Session context for test-driven fixes against an Ollama server.

    Lifecycle of one run_fix() call:
        IDLE -> REQUESTING -> STREAMING -> COMPLETED
        IDLE -> REQUESTING -> FAILED
        STREAMING -> FAILED
    """

    def __init__(
        self,
        endpoint: str = DEFAULT_ENDPOINT,
        model: str = "",
        source: str = "",
        tests: str = "",
        error_log: str = "",
        auto_apply: bool = False,
        apply_delay: float = 0.0,
        timeout: float = 60,
        client: Optional[OllamaClient] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.endpoint = endpoint
        self.model = model
        self.source = source
        self.tests = tests
        self.error_log = error_log
        self.auto_apply = auto_apply
        self.apply_delay = apply_delay
        self.client = client or OllamaClient(endpoint, timeout=timeout)
        self._sleep = sleep

        self.connected = False
        self.fix_result = ""
        self.state = FixState.IDLE
        self.is_fixing = False
        self.last_error: Optional[TransportError] = None

    # ------------------------------------------------------------------
    # Connection
    # ------------------------------------------------------------------
    def connect(self) -> List[OllamaModel]:
        """
        Check the server and load its model catalog.

        Selects the first installed model when none is chosen yet.
        """
        self.connected = self.client.check_connection()
        if not self.connected:
            logger.warning(f"Ollama not reachable at {self.client.endpoint}")
            return []

        models = self.client.fetch_models()
        if not self.model and models:
            self.model = models[0].name
            logger.info(f"No model selected, defaulting to {self.model}")
        return models

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------
    def run_fix(self, on_fragment: Optional[FragmentCallback] = None) -> str:
        """
        Stream a fix into `fix_result` and return the full response.

        Raises:
            NotConnectedError: No reachable server or no model selected
            SessionBusyError: Another fix is still running
            TransportError: The request or stream failed; `fix_result`
                keeps the partial output followed by an error notice
        """
        if self.is_fixing or self.state.is_active:
            raise SessionBusyError("A fix is already in progress")
        if not self.connected or not self.model:
            raise NotConnectedError("Please connect to Ollama and select a model first.")

        self.is_fixing = True
        self.fix_result = ""
        self.last_error = None
        self.state = FixState.REQUESTING

        try:
            fragments = open_fix_stream(
                self.client, self.model, self.source, self.tests, self.error_log
            )
            self.state = FixState.STREAMING
            for fragment in fragments:
                self.fix_result += fragment
                if on_fragment is not None:
                    on_fragment(fragment)
        except TransportError as e:
            logger.error(f"Generation failed: {e}")
            self.state = FixState.FAILED
            self.last_error = e
            self.fix_result += GENERATION_ERROR_NOTICE
            raise
        finally:
            # Any other escape (callback error, interrupt) still ends the run
            if self.state.is_active:
                self.state = FixState.FAILED
            self.is_fixing = False

        self.state = FixState.COMPLETED
        logger.info(f"Fix completed ({len(self.fix_result)} chars)")

        if self.auto_apply:
            if self.apply_delay > 0:
                self._sleep(self.apply_delay)
            self.apply_fix(self.fix_result, interactive=False)

        return self.fix_result

    # ------------------------------------------------------------------
    # Apply
    # ------------------------------------------------------------------
    def apply_fix(self, text: Optional[str] = None, interactive: bool = True) -> bool:
        """
        Replace `source` with the last fenced code block of `text`.

        Defaults to the current `fix_result`. Returns True when the
        source was replaced. With nothing to apply, interactive mode
        raises NoCodeBlockError and automatic mode returns False.
        """
        if text is None:
            text = self.fix_result

        code = extract_last_code_block(text)
        if code is None:
            if interactive:
                raise NoCodeBlockError("No markdown code block found in the result to apply.")
            logger.debug("Auto-apply skipped: no code block in result")
            return False

        self.source = code
        logger.info(f"Applied fix ({len(code)} chars)")
        return True
