"""Response envelopes returned by every command dispatch.

Success:
    {"success": true, "data": ..., "request_id": "...", "timestamp": 1700000000,
     "execution_time_ms": 12.5}

Error:
    {"success": false, "error": {"code": "...", "message": "...", "data": {...}},
     "request_id": "...", "timestamp": 1700000000}

``error.data`` is omitted when there is nothing to report. Envelopes carry
everything a consumer needs, so ``parse_envelope(envelope.to_dict())``
reconstructs an equal envelope.
"""

from typing import Any, Dict, Literal, Union

from pydantic import Field, TypeAdapter

from infrastructure.models.base import InfrastructureModel


class ErrorDetail(InfrastructureModel):
    """Error body of an error envelope.

    Attributes:
        code: Error code from the closed taxonomy
        message: Human-readable message
        data: Optional structured details
    """

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    data: Dict[str, Any] | None = Field(
        default=None, description="Optional additional error details"
    )


class SuccessEnvelope(InfrastructureModel):
    """Envelope for a handler that completed."""

    success: Literal[True] = True
    data: Any = Field(default=None, description="Handler result")
    request_id: str
    timestamp: int = Field(..., description="Unix timestamp (seconds)")
    execution_time_ms: float = Field(..., ge=0)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")


class ErrorEnvelope(InfrastructureModel):
    """Envelope for a denied, invalid or failed call."""

    success: Literal[False] = False
    error: ErrorDetail
    request_id: str
    timestamp: int = Field(..., description="Unix timestamp (seconds)")

    @property
    def code(self) -> str:
        return self.error.code

    def to_dict(self) -> Dict[str, Any]:
        envelope = self.model_dump(mode="json")
        if envelope["error"].get("data") is None:
            envelope["error"].pop("data", None)
        return envelope


Envelope = Union[SuccessEnvelope, ErrorEnvelope]

_envelope_adapter: TypeAdapter = TypeAdapter(Envelope)


def parse_envelope(payload: Dict[str, Any]) -> Union[SuccessEnvelope, ErrorEnvelope]:
    """Reconstruct an envelope from its serialized form.

    Raises:
        pydantic.ValidationError: If the payload is not a valid envelope
    """
    return _envelope_adapter.validate_python(payload)
