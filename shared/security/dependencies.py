from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer

from shared.errors import Unauthorized
from .jwt_handler import verify_access_token
from .policy import Actor, Role

# Defines the expected header format (Bearer <token>)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="accounts/login", auto_error=False)

async def get_current_actor(token: str = Depends(oauth2_scheme)) -> Actor:
    """Dependency to validate the JWT and return the calling Actor (sub + role)."""
    if not token:
        raise Unauthorized()

    payload = verify_access_token(token)
    if payload is None:
        raise Unauthorized()

    user_id = payload.get("sub")
    if user_id is None:
        raise Unauthorized()

    try:
        return Actor(id=int(user_id), role=Role(payload.get("role", Role.USER.value)))
    except ValueError:
        raise Unauthorized() from None
