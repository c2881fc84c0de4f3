# Core modules
from .code_extractor import CodeExtractor, extract_last_code_block
from .errors import (
    JesterError,
    NoCodeBlockError,
    NotConnectedError,
    SessionBusyError,
    TransportError,
)
from .fix_session import FixSession
from .generation import generate_fix
from .models import FixState, GenerationRecord, OllamaModel
from .ollama_client import OllamaClient, normalize_endpoint
from .stream_decoder import StreamDecoder, iter_fragments, iter_records

__all__ = [
    "CodeExtractor",
    "extract_last_code_block",
    "JesterError",
    "NoCodeBlockError",
    "NotConnectedError",
    "SessionBusyError",
    "TransportError",
    "FixSession",
    "generate_fix",
    "FixState",
    "GenerationRecord",
    "OllamaModel",
    "OllamaClient",
    "normalize_endpoint",
    "StreamDecoder",
    "iter_fragments",
    "iter_records",
]
