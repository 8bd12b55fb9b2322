"""Actor derivation for command endpoints.

The HTTP layer is the only place that reads sessions; the command core
receives the resulting Actor explicitly.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from infrastructure.logging import get_module_logger
from infrastructure.security import Actor
from infrastructure.services import SessionManagerDep

logger = get_module_logger()
bearer = HTTPBearer(auto_error=False)


def get_client_address(request: Request) -> str:
    if request.client and request.client.host:
        return request.client.host
    return "unknown"


def get_actor(
    request: Request,
    sessions: SessionManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Actor:
    """Resolve the calling actor.

    No credentials yields an anonymous actor keyed by the client address.

    Raises:
        HTTPException: 401 if a session is presented but cannot be resolved
    """
    if credentials is None:
        return Actor.anonymous(get_client_address(request))

    actor = sessions.resolve(credentials.credentials)
    if actor is None:
        logger.warning(
            "session_rejected",
            path=request.url.path,
            ip_address=get_client_address(request),
        )
        raise HTTPException(
            status_code=401,
            detail="Invalid or expired session",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor


ActorDep = Annotated[Actor, Depends(get_actor)]
