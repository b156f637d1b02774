# regit/routers/auth.py
from __future__ import annotations
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from regit.clients.oauth_providers import OAuthCallbackError, OAuthProviderError, UnknownProviderError
from regit.database import get_db
from regit.routers.deps import get_auth_service
from regit.services.auth_service import AuthRedirect, AuthService, InvalidReturnURL, write_cookies

router = APIRouter(tags=["auth"])


# ---- Helpers ----
def _redirect(result: AuthRedirect) -> RedirectResponse:
    response = RedirectResponse(url=result.location, status_code=status.HTTP_302_FOUND)
    write_cookies(response, result.cookies)
    return response


# ---- Routes ----
@router.get("/login/{provider}", summary="Start the OAuth login round trip")
def login(
    provider: str,
    request: Request,
    r: Optional[str] = Query(default=None, description="Base64-encoded return URL"),
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        result = auth.begin_login(db, request, provider, return_url=r)
    except UnknownProviderError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown provider")
    return _redirect(result)


@router.get("/auth/callback/{provider}", summary="Complete the OAuth login and issue a session")
def callback(
    provider: str,
    request: Request,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
):
    try:
        result = auth.complete_login(db, request, provider)
    except UnknownProviderError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown provider")
    except OAuthCallbackError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid callback")
    except OAuthProviderError:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Provider error")
    except InvalidReturnURL as e:
        # the session is already issued; keep the browser's cookies in step with it
        response = JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "Invalid return URL"})
        write_cookies(response, e.cookies)
        return response
    return _redirect(result)


@router.get("/logout", summary="Destroy the session and the provider artifacts")
def logout(
    request: Request,
    db: Session = Depends(get_db),
    auth: AuthService = Depends(get_auth_service),
):
    writes = auth.logout(db, request)
    response = Response(status_code=status.HTTP_200_OK)
    write_cookies(response, writes)
    return response
