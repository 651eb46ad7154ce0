from fastapi import Header, HTTPException
from starlette.status import HTTP_401_UNAUTHORIZED
from .config import settings

def require_api_key(x_api_key: str | None = Header(default=None, alias="x-api-key")):
    """
    Header-based API key check.
    Disabled when API_KEY is unset so a local UI can call the service directly.
    """
    if not settings.API_KEY:
        return
    if x_api_key != settings.API_KEY:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid API key")
