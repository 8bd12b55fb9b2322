"""Command endpoints.

Every command outcome is returned as a response envelope with HTTP 200;
the envelope itself carries success or the error code. Only transport
problems (bad session, malformed body) use HTTP error statuses.
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from api.dependencies.actors import ActorDep
from infrastructure.commands.errors import CommandError, ErrorCode
from infrastructure.logging import get_module_logger
from infrastructure.services import CommandServiceDep

logger = get_module_logger()

router = APIRouter(prefix="/commands", tags=["Commands"])


class CommandRequest(BaseModel):
    """Body of a command call."""

    payload: Dict[str, Any] = Field(default_factory=dict)
    token: Optional[str] = None


class RetryRequest(BaseModel):
    token: Optional[str] = None


@router.post("/{action}")
def dispatch_command(
    action: str,
    body: CommandRequest,
    service: CommandServiceDep,
    actor: ActorDep,
):
    """Dispatch a client-issued action and return its envelope."""
    return service.dispatch(action, body.payload, body.token, actor).to_dict()


@router.post("/requests/{ticket_id}/retry")
def retry_request(
    ticket_id: str,
    body: RetryRequest,
    service: CommandServiceDep,
    actor: ActorDep,
):
    """Retry a queued request immediately."""
    return service.retry(ticket_id, body.token, actor).to_dict()


@router.get("/requests/{ticket_id}/status")
def get_request_status(
    ticket_id: str,
    service: CommandServiceDep,
    actor: ActorDep,
    token: Optional[str] = None,
):
    """Report whether a request is still queued for retry."""
    return service.status(ticket_id, token, actor).to_dict()


@router.post("/tokens/{action}")
def refresh_token(action: str, service: CommandServiceDep, actor: ActorDep):
    """Issue a fresh anti-forgery token for an action."""
    try:
        token = service.issue_token(action, actor)
    except CommandError as e:
        status_code = 404 if e.code == ErrorCode.UNKNOWN_ACTION else 403
        raise HTTPException(status_code=status_code, detail=e.message) from e
    return {"action": action, "token": token, "expires_in": service.tokens.ttl_seconds}


@router.get("/queue/stats")
def get_queue_statistics(service: CommandServiceDep, actor: ActorDep):
    """Retry queue statistics (administrative)."""
    if not actor.can(service.dispatch_config.default_capability):
        logger.warning("queue_stats_forbidden", actor_id=actor.actor_id)
        raise HTTPException(status_code=403, detail="Insufficient permissions")
    return service.statistics()
