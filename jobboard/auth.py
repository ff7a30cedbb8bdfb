"""
Current-actor lookup.

A request may carry an Appwrite JWT. Without one, or when the service
rejects it, there is no actor and writes are owned by "anonymous". Any other
failure while looking the actor up is an AuthenticationError.
"""

from dataclasses import dataclass
from typing import Optional

from .appwrite import AppwriteClient
from .errors import AuthenticationError, RemoteServiceError
from .logger import get_logger

logger = get_logger()

# Status codes meaning "this credential is not a session", not "lookup broke".
_REJECTED_STATUSES = {401, 403}


@dataclass(frozen=True)
class Actor:
    id: str
    name: Optional[str] = None
    email: Optional[str] = None


def resolve_actor(client: AppwriteClient, jwt: Optional[str] = None) -> Optional[Actor]:
    """
    Resolve the actor behind a JWT.

    Args:
        client: Store client for the project
        jwt: Token issued to the signed-in user, if any

    Returns:
        Actor, or None when unauthenticated

    Raises:
        AuthenticationError: If the lookup itself fails
    """
    if not jwt:
        return None
    try:
        account = client.get_account(jwt)
    except RemoteServiceError as e:
        if e.status_code in _REJECTED_STATUSES:
            logger.info("Actor token rejected, continuing unauthenticated", status=e.status_code)
            return None
        raise AuthenticationError(f"Could not resolve current actor: {e}") from e

    if not account.id:
        raise AuthenticationError("Could not resolve current actor: account has no id")
    return Actor(id=account.id, name=account.name or None, email=account.email or None)
