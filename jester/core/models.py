"""
Data types shared by the Ollama client, the stream decoder and the fix session.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class FixState(Enum):
    """Lifecycle of a single fix invocation."""
    IDLE = "idle"
    REQUESTING = "requesting"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_active(self) -> bool:
        return self in (FixState.REQUESTING, FixState.STREAMING)


@dataclass
class GenerationRecord:
    """One line of an Ollama /api/generate stream."""
    model: str = ""
    created_at: str = ""
    response: str = ""
    done: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GenerationRecord":
        """
        Build a record from a decoded JSON object.

        Raises:
            ValueError: If the payload is not a JSON object
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
        response = data.get("response") or ""
        return cls(
            model=str(data.get("model") or ""),
            created_at=str(data.get("created_at") or ""),
            response=response if isinstance(response, str) else str(response),
            done=bool(data.get("done", False)),
        )


@dataclass
class ModelDetails:
    """Model metadata as reported by /api/tags."""
    format: str = ""
    family: str = ""
    families: Optional[List[str]] = None
    parameter_size: str = ""
    quantization_level: str = ""


@dataclass
class OllamaModel:
    """A locally installed model from the Ollama catalog."""
    name: str
    modified_at: str = ""
    size: int = 0
    digest: str = ""
    details: ModelDetails = field(default_factory=ModelDetails)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OllamaModel":
        details = data.get("details") or {}
        return cls(
            name=str(data.get("name") or ""),
            modified_at=str(data.get("modified_at") or ""),
            size=int(data.get("size") or 0),
            digest=str(data.get("digest") or ""),
            details=ModelDetails(
                format=details.get("format") or "",
                family=details.get("family") or "",
                families=details.get("families"),
                parameter_size=details.get("parameter_size") or "",
                quantization_level=details.get("quantization_level") or "",
            ),
        )


@dataclass
class FencedBlock:
    """A markdown code fence found in model output."""
    language: str
    payload: str
    start: int
