"""
# Authentication Dependencies

FastAPI dependencies resolving the authenticated admin user.

## Flow

1. `oauth2_scheme` extracts the bearer token from the `Authorization` header.
2. The token is verified with `SECRET_KEY` / `ALGORITHM` (python-jose).
3. The user id is read from the `id` claim (falling back to `sub`).
4. The user is loaded from the `user` collection; deleted or inactive users
   are rejected.

The returned user document carries `_id` (ObjectId) and `id` (string).

## Usage

```python
@router.post("/create")
async def add_blog(current_user: dict = Depends(get_current_user_dep)):
    ...
```
"""

from typing import Any, Dict

from bson import ObjectId
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from admin_backend.config import settings
from admin_backend.database import db_manager
from admin_backend.managers.logging_manager import get_logger
from admin_backend.utils.response_handler import DEFAULT_MESSAGES, ResponseStatus, build_body

logger = get_logger(prefix="[Security Dependencies]")

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/admin/auth/login")

USER_COLLECTION = "user"


def credentials_exception(message: str = DEFAULT_MESSAGES[ResponseStatus.UNAUTHORIZED]) -> HTTPException:
    """401 carrying the standard `unauthorized` envelope as its detail."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=build_body(ResponseStatus.UNAUTHORIZED, message),
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify a JWT and return its claims.

    Raises:
        HTTPException(401): If the signature, expiry or format is invalid.
    """
    try:
        return jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning("Rejected access token: %s", e)
        raise credentials_exception() from e


async def get_current_user(token: str) -> Dict[str, Any]:
    """
    Resolve the user a token belongs to.

    Args:
        token (str): The JWT access token.

    Returns:
        dict: The user document with `id` set to the string identifier.

    Raises:
        HTTPException(401): If the token is invalid or the user is missing, deleted or inactive.
    """
    payload = decode_access_token(token)
    user_id = payload.get("id") or payload.get("sub")
    if not user_id or not ObjectId.is_valid(str(user_id)):
        logger.warning("Access token without a valid user id claim")
        raise credentials_exception()

    user = await db_manager.get_collection(USER_COLLECTION).find_one({"_id": ObjectId(str(user_id))})
    if not user:
        logger.warning("Access token for unknown user %s", user_id)
        raise credentials_exception()

    if user.get("isDeleted") or user.get("isActive") is False:
        logger.warning("Access token for deactivated user %s", user_id)
        raise credentials_exception("User account is deactivated")

    user["id"] = str(user["_id"])
    return user


async def get_current_user_dep(token: str = Depends(oauth2_scheme)) -> Dict[str, Any]:
    """FastAPI dependency wrapper around `get_current_user`."""
    return await get_current_user(token)
