"""Infrastructure models and response envelopes.

Exports:
    InfrastructureModel: Base model configuration for infrastructure components
    SuccessEnvelope: Envelope for completed handlers
    ErrorEnvelope: Envelope for denied, invalid or failed calls
    ErrorDetail: Error body of an ErrorEnvelope
    parse_envelope: Reconstruct an envelope from its serialized form
"""

from infrastructure.models.base import InfrastructureModel
from infrastructure.models.responses import (
    Envelope,
    ErrorDetail,
    ErrorEnvelope,
    SuccessEnvelope,
    parse_envelope,
)

__all__ = [
    "Envelope",
    "ErrorDetail",
    "ErrorEnvelope",
    "InfrastructureModel",
    "SuccessEnvelope",
    "parse_envelope",
]
