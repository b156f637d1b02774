# regit/clients/oauth_providers.py
"""
OAuth 2.0 identity providers.

Each provider knows how to build its authorization URL, exchange an
authorization code for a token, and turn that token into a verified identity.
Providers are registered by name; the name is the {provider} path segment of
/login/{provider} and /auth/callback/{provider}.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional
from urllib.parse import urlencode
import logging

import httpx

logger = logging.getLogger(__name__)


# ---- errors ----
class OAuthError(Exception):
    """Base class for OAuth client failures."""

class UnknownProviderError(OAuthError):
    """No provider is registered under the requested name."""

class OAuthCallbackError(OAuthError):
    """The callback request itself is invalid (state mismatch, missing code, provider-reported error)."""

class OAuthProviderError(OAuthError):
    """The provider could not be reached or answered with an error."""


@dataclass
class ProviderIdentity:
    provider: str
    external_id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    nickname: Optional[str] = None


class OAuthProvider(ABC):
    name: str

    @abstractmethod
    def authorization_url(self, state: str) -> str:
        ...

    @abstractmethod
    def exchange_code(self, code: str) -> Dict[str, Any]:
        """Exchange an authorization code for the provider's token payload."""

    @abstractmethod
    def fetch_identity(self, token: Dict[str, Any]) -> ProviderIdentity:
        ...

    def close(self) -> None:
        pass


class GoogleProvider(OAuthProvider):
    """Authorization code flow against Google's OAuth 2.0 endpoints."""

    name = "google"
    AUTH_URL = "https://accounts.google.com/o/oauth2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
    DEFAULT_SCOPES = ["openid", "email", "profile"]

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        *,
        scopes: Optional[List[str]] = None,
        timeout: float = 10.0,
        http_client: Optional[httpx.Client] = None,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.scopes = scopes or list(self.DEFAULT_SCOPES)
        self._http = http_client or httpx.Client(
            timeout=timeout,
            headers={"Accept": "application/json"},
        )

    def authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": " ".join(self.scopes),
            "state": state,
        }
        return f"{self.AUTH_URL}?{urlencode(params)}"

    def exchange_code(self, code: str) -> Dict[str, Any]:
        data = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "code": code,
            "redirect_uri": self.redirect_uri,
            "grant_type": "authorization_code",
        }
        try:
            resp = self._http.post(self.TOKEN_URL, data=data)
            resp.raise_for_status()
            payload = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OAuthProviderError(f"google token exchange failed: {e}") from e

        if not payload.get("access_token"):
            raise OAuthProviderError("google token response has no access_token")
        logger.info("google token exchange succeeded")
        return payload

    def fetch_identity(self, token: Dict[str, Any]) -> ProviderIdentity:
        headers = {"Authorization": f"Bearer {token['access_token']}"}
        try:
            resp = self._http.get(self.USERINFO_URL, headers=headers)
            resp.raise_for_status()
            info = resp.json()
        except (httpx.HTTPError, ValueError) as e:
            raise OAuthProviderError(f"google userinfo request failed: {e}") from e

        external_id = str(info.get("id") or "")
        if not external_id:
            raise OAuthProviderError("google userinfo response has no id")

        return ProviderIdentity(
            provider=self.name,
            external_id=external_id,
            email=info.get("email"),
            first_name=info.get("given_name"),
            last_name=info.get("family_name"),
            nickname=info.get("name"),
        )

    def close(self) -> None:
        self._http.close()


class ProviderRegistry:
    """Providers keyed by name."""

    def __init__(self, providers: Iterable[OAuthProvider] = ()):
        self._providers: Dict[str, OAuthProvider] = {}
        for p in providers:
            self.register(p)

    def register(self, provider: OAuthProvider) -> None:
        self._providers[provider.name] = provider

    def get(self, name: str) -> OAuthProvider:
        try:
            return self._providers[name]
        except KeyError:
            raise UnknownProviderError(f"unknown provider: {name}") from None

    def names(self) -> List[str]:
        return sorted(self._providers)

    def close(self) -> None:
        for p in self._providers.values():
            p.close()
