from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import HTTPException, status
from services.auth import decode_subject, oauth2_scheme

PUBLIC_PATHS = ["/register", "/token", "/google-login", "/ws", "/health", "/docs", "/openapi.json"]


class AuthMiddleware(BaseHTTPMiddleware):
    """Rejects requests without a valid bearer token before routing.

    Only the token is checked here; `get_current_user` still loads the
    profile, so a token for a deleted account fails in the route.
    """

    async def dispatch(self, request: Request, call_next):
        # Bypass authentication for specific routes
        if request.url.path in PUBLIC_PATHS or request.method == "OPTIONS":
            return await call_next(request)

        try:
            token = await oauth2_scheme(request)
        except HTTPException:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Not authenticated"},
            )
        if decode_subject(token) is None:
            return JSONResponse(
                status_code=status.HTTP_401_UNAUTHORIZED,
                content={"detail": "Could not validate credentials"},
            )
        return await call_next(request)
