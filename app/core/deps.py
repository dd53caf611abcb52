from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.security import decode_token
from app.services.identity import AuthPrincipal

bearer = HTTPBearer(auto_error=False)

async def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(bearer),
) -> AuthPrincipal | None:
    """Decode the optional bearer token.

    No token means an anonymous caller (None); a token that is present but
    does not decode is rejected.
    """
    if creds is None or not creds.credentials:
        return None

    try:
        data = decode_token(creds.credentials)
    except ValueError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    if data.get("type") != "access":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token type")

    subject = data.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token has no subject")

    return AuthPrincipal(subject=str(subject), name=data.get("name"))
