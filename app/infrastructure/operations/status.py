"""Outcome classes for store backend calls."""

from enum import Enum


class OperationStatus(Enum):
    """How a backend call ended.

    TRANSIENT_ERROR covers failures worth repeating later (connection
    refused, socket timeout). PERMANENT_ERROR covers failures that will
    recur unchanged (corrupt stored value, command rejected by the server).
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
