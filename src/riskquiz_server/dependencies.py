"""FastAPI dependency injection — registry, backends and caller identity.

The quiz registry is built once in the lifespan handler and stashed on
``app.state``.  Database access goes through the SQL port adapters, which
open their own sessions, so routes never hold an ``AsyncSession``.
"""

import hmac

from fastapi import Header, HTTPException, Request

from riskquiz_server.registry import QuizBackends, QuizRegistry


# ------------------------------------------------------------------
# Registry & backends: stashed on app.state during lifespan
# ------------------------------------------------------------------

def get_registry(request: Request) -> QuizRegistry:
    """Return the QuizRegistry singleton from ``app.state``."""
    return request.app.state.registry


def get_backends(request: Request) -> QuizBackends:
    """Return the collaborator implementations from ``app.state``."""
    return request.app.state.registry.backends


# ------------------------------------------------------------------
# User identity: optional X-User-ID header
# ------------------------------------------------------------------

async def get_user_id(
    request: Request,
    x_user_id: str | None = Header(None, alias="X-User-ID"),
    x_proxy_secret: str | None = Header(None, alias="X-Proxy-Secret"),
) -> str | None:
    """Extract the caller's identity from ``X-User-ID``, if present.

    Anonymous callers may take the quiz; the engine raises
    ``AuthenticationRequired`` only when it needs to save answers.

    When ``TRUSTED_PROXY_SECRET`` is configured, a request that carries
    ``X-User-ID`` must also carry a matching ``X-Proxy-Secret``.
    """
    if not x_user_id:
        return None

    expected_secret: str | None = request.app.state.settings.trusted_proxy_secret
    if expected_secret:
        if not x_proxy_secret:
            raise HTTPException(
                status_code=403,
                detail="X-Proxy-Secret header is required",
            )
        if not hmac.compare_digest(x_proxy_secret, expected_secret):
            raise HTTPException(status_code=403, detail="Invalid proxy secret")

    return x_user_id
