"""Backend call outcomes.

Store backends report through OperationResult internally and convert a
failed result into StoreError at their public surface.
"""

from infrastructure.operations.classifiers import classify_redis_error
from infrastructure.operations.result import OperationResult
from infrastructure.operations.status import OperationStatus

__all__ = [
    "OperationResult",
    "OperationStatus",
    "classify_redis_error",
]
