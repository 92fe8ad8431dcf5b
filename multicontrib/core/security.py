from fastapi import HTTPException
from fastapi import Request
from fastapi import Security
from fastapi.security import HTTPAuthorizationCredentials
from fastapi.security import HTTPBearer


bearer_scheme = HTTPBearer(auto_error=False)


def optional_bearer_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
) -> str | None:
    """Return the request's Bearer token, or None when no header was sent.

    A token supplied this way is used for every requested user instead of
    the tokens configured in settings.

    Raises:
        HTTPException: If an Authorization header is present but malformed or empty.
    """

    if credentials is None:
        if request.headers.get("authorization"):
            raise HTTPException(
                status_code=401,
                detail="Authorization header must carry a Bearer token",
            )
        return None

    token = credentials.credentials.strip()
    if not token:
        raise HTTPException(
            status_code=401,
            detail="Authorization header must carry a Bearer token",
        )

    return token
