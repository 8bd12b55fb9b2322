"""Result value returned by store backends instead of raising."""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from infrastructure.operations.status import OperationStatus


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one backend call.

    Attributes:
        status: How the call ended
        message: Human readable summary for logs
        data: Value produced by a successful read
        error_code: Machine code such as CONNECTION_ERROR
        key: Store key the call touched, when there is one
    """

    status: OperationStatus
    message: str = ""
    data: Optional[Any] = None
    error_code: Optional[str] = None
    key: Optional[str] = None

    @property
    def is_success(self) -> bool:
        return self.status is OperationStatus.SUCCESS

    @property
    def is_transient(self) -> bool:
        return self.status is OperationStatus.TRANSIENT_ERROR

    def log_fields(self) -> Dict[str, Any]:
        """Fields worth binding to a log entry about this result."""
        fields: Dict[str, Any] = {"status": self.status.value}
        if self.error_code:
            fields["error_code"] = self.error_code
        if self.key is not None:
            fields["key"] = self.key
        return fields

    @classmethod
    def success(
        cls, data: Optional[Any] = None, message: str = "ok", key: Optional[str] = None
    ) -> "OperationResult":
        return cls(OperationStatus.SUCCESS, message, data=data, key=key)

    @classmethod
    def transient_error(
        cls, message: str, error_code: Optional[str] = None, key: Optional[str] = None
    ) -> "OperationResult":
        """Failure expected to clear up, e.g. a dropped connection."""
        return cls(
            OperationStatus.TRANSIENT_ERROR, message, error_code=error_code, key=key
        )

    @classmethod
    def permanent_error(
        cls, message: str, error_code: Optional[str] = None, key: Optional[str] = None
    ) -> "OperationResult":
        """Failure that repeating the call will not fix."""
        return cls(
            OperationStatus.PERMANENT_ERROR, message, error_code=error_code, key=key
        )
