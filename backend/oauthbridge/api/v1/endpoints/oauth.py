"""OAuth1 sign-in endpoints.

``/{provider}/start`` obtains a request token and redirects the browser to the
provider. ``/{provider}/callback`` receives ``oauth_token`` and
``oauth_verifier`` and answers with the normalized profile or an error.
The flow id travels between the two in an HttpOnly cookie.
"""

import secrets
from typing import Optional

from fastapi import APIRouter, Cookie, Depends, Query, Request, Response
from fastapi.responses import JSONResponse, RedirectResponse

from oauthbridge.api.deps import get_handshake_service
from oauthbridge.core.config import settings
from oauthbridge.core.logging import logger
from oauthbridge.domains.oauth.protocols import OAuth1HandshakeServiceProtocol
from oauthbridge.domains.oauth.types import OAuthErrorCode, OAuthErrorResult

router = APIRouter()

FLOW_COOKIE = "oauthbridge_flow"

_ERROR_STATUS = {
    OAuthErrorCode.ACCESS_DENIED: 401,
    OAuthErrorCode.TOKEN_REQUEST_FAILED: 502,
    OAuthErrorCode.OAUTH_VERIFIER_ERROR: 502,
    OAuthErrorCode.VERIFY_CREDENTIALS_ERROR: 502,
    OAuthErrorCode.NETWORK_ERROR: 502,
}


def _cookie_path(provider: str) -> str:
    return f"/api/v1/oauth/{provider}"


def _error_response(error: OAuthErrorResult) -> JSONResponse:
    return JSONResponse(
        status_code=_ERROR_STATUS.get(error.code, 502),
        content=error.model_dump(mode="json"),
    )


@router.get("/{provider}/start")
async def start_oauth1(
    provider: str,
    service: OAuth1HandshakeServiceProtocol = Depends(get_handshake_service),
) -> Response:
    """Start an OAuth1 sign-in and redirect the user to the provider.

    Returns:
    -------
        Response: 302 redirect to the provider's authorization URL, or a JSON
        error if no request token could be obtained.

    """
    flow_id = secrets.token_urlsafe(32)

    result = await service.start(flow_id)
    if isinstance(result, OAuthErrorResult):
        return _error_response(result)

    response = RedirectResponse(result.url, status_code=302)
    response.set_cookie(
        FLOW_COOKIE,
        flow_id,
        max_age=settings.TOKEN_STORE_TTL_SECONDS,
        path=_cookie_path(provider),
        httponly=True,
        secure=not settings.is_local,
        samesite="lax",
    )
    return response


@router.get("/{provider}/callback")
async def oauth1_callback(
    provider: str,
    request: Request,
    oauth_token: Optional[str] = Query(None, description="OAuth1 token parameter"),
    oauth_verifier: Optional[str] = Query(None, description="OAuth1 verifier"),
    flow_id: Optional[str] = Cookie(None, alias=FLOW_COOKIE),
    service: OAuth1HandshakeServiceProtocol = Depends(get_handshake_service),
) -> JSONResponse:
    """Handle the provider's redirect back after the user authorized (or declined).

    Returns:
    -------
        JSONResponse: The normalized profile, or ``{code, message, raw}`` on failure.

    """
    callback_params = dict(request.query_params)

    if not flow_id:
        logger.warning(f"OAuth1 callback for {provider} without a flow cookie")
        result = OAuthErrorResult(
            code=OAuthErrorCode.ACCESS_DENIED,
            message="No pending authorization for this flow (session missing, expired, or reused).",
            raw=callback_params,
        )
    else:
        result = await service.complete(
            flow_id,
            oauth_token=oauth_token,
            oauth_verifier=oauth_verifier,
            params=callback_params,
        )

    if isinstance(result, OAuthErrorResult):
        response = _error_response(result)
    else:
        response = JSONResponse(status_code=200, content=result.as_dict())

    response.delete_cookie(FLOW_COOKIE, path=_cookie_path(provider))
    return response
