"""Social Provider Client - resolves and revokes provider identities over HTTP.

Invariants:
    - fetch_provider_id returns the provider's stable user id, never an email
    - An unreachable provider maps to HTTP_CLIENT_ERROR; a rejected token or bad
      payload maps to SOCIAL_LOGIN_ERROR; Apple identity-token failures map to
      APPLE_LOGIN_ERROR
    - revoke() is best effort: failures are logged, the local withdrawal proceeds
    - NAVER has no revoke endpoint that takes only a user token; it is skipped

Design Decisions:
    - Apple signs identity tokens with rotating keys: PyJWKClient fetches the JWKS;
      it is blocking, so it runs in a worker thread
    - httpx transport injectable so tests never reach the network
"""

import asyncio
import logging

import httpx
import jwt

from plub.config import Settings
from plub.core.domain_types import SocialType
from plub.core.errors import ErrorKind, PlubError

logger = logging.getLogger(__name__)

GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"
GOOGLE_REVOKE_URL = "https://oauth2.googleapis.com/revoke"
KAKAO_USER_URL = "https://kapi.kakao.com/v2/user/me"
KAKAO_UNLINK_URL = "https://kapi.kakao.com/v1/user/unlink"
NAVER_USER_URL = "https://openapi.naver.com/v1/nid/me"
APPLE_ISSUER = "https://appleid.apple.com"
APPLE_KEYS_URL = "https://appleid.apple.com/auth/keys"
APPLE_TOKEN_URL = "https://appleid.apple.com/auth/token"
APPLE_REVOKE_URL = "https://appleid.apple.com/auth/revoke"


class SocialClient:
    """Talks to Google, Kakao, Naver and Apple on behalf of auth and account services."""

    def __init__(
        self,
        kakao_admin_key: str,
        apple_client_id: str,
        apple_client_secret: str,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.kakao_admin_key = kakao_admin_key
        self.apple_client_id = apple_client_id
        self.apple_client_secret = apple_client_secret
        self.timeout_seconds = timeout_seconds
        self._transport = transport
        self._apple_keys: jwt.PyJWKClient | None = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "SocialClient":
        return cls(
            kakao_admin_key=settings.kakao_admin_key,
            apple_client_id=settings.apple_client_id,
            apple_client_secret=settings.apple_client_secret,
            timeout_seconds=settings.social_timeout_seconds,
        )

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.timeout_seconds, transport=self._transport,
        )

    # --- Login ----------------------------------------------------------

    async def fetch_provider_id(self, social_type: SocialType, token: str) -> str:
        """Resolve the provider user id behind an access (or Apple identity) token."""
        if social_type is SocialType.APPLE:
            return await self._verify_apple_identity(token)
        if social_type is SocialType.GOOGLE:
            payload = await self._get_json(GOOGLE_USERINFO_URL, token)
            provider_id = payload.get("id")
        elif social_type is SocialType.KAKAO:
            payload = await self._get_json(KAKAO_USER_URL, token)
            provider_id = payload.get("id")
        elif social_type is SocialType.NAVER:
            payload = await self._get_json(NAVER_USER_URL, token)
            provider_id = (payload.get("response") or {}).get("id")
        else:
            raise PlubError(ErrorKind.SOCIAL_TYPE_ERROR)

        if provider_id is None:
            logger.warning(f"{social_type.value} userinfo without id")
            raise PlubError(ErrorKind.SOCIAL_LOGIN_ERROR)
        return str(provider_id)

    async def _get_json(self, url: str, token: str) -> dict:
        try:
            async with self._client() as client:
                response = await client.get(
                    url, headers={"Authorization": f"Bearer {token}"},
                )
        except httpx.HTTPError as e:
            logger.error(f"Social userinfo request failed: {e}")
            raise PlubError(ErrorKind.HTTP_CLIENT_ERROR)
        if response.status_code != 200:
            logger.warning(
                f"Social userinfo rejected with status {response.status_code}",
                extra={"status_code": response.status_code},
            )
            raise PlubError(ErrorKind.SOCIAL_LOGIN_ERROR)
        try:
            return response.json()
        except ValueError:
            raise PlubError(ErrorKind.SOCIAL_LOGIN_ERROR)

    async def _verify_apple_identity(self, identity_token: str) -> str:
        if self._apple_keys is None:
            self._apple_keys = jwt.PyJWKClient(APPLE_KEYS_URL)
        try:
            signing_key = await asyncio.to_thread(
                self._apple_keys.get_signing_key_from_jwt, identity_token,
            )
            claims = jwt.decode(
                identity_token,
                signing_key.key,
                algorithms=["RS256"],
                audience=self.apple_client_id,
                issuer=APPLE_ISSUER,
            )
        except (jwt.PyJWKClientError, jwt.InvalidTokenError) as e:
            logger.warning(f"Apple identity token rejected: {e}")
            raise PlubError(ErrorKind.APPLE_LOGIN_ERROR)
        return str(claims["sub"])

    # --- Revoke ---------------------------------------------------------

    async def revoke(
        self,
        social_type: SocialType,
        provider_id: str,
        access_token: str | None = None,
        authorization_code: str | None = None,
    ) -> bool:
        """Unlink the account at the provider. Returns False when it could not."""
        try:
            async with self._client() as client:
                if social_type is SocialType.GOOGLE and access_token:
                    response = await client.post(
                        GOOGLE_REVOKE_URL, data={"token": access_token},
                    )
                elif social_type is SocialType.KAKAO:
                    response = await client.post(
                        KAKAO_UNLINK_URL,
                        data={"target_id_type": "user_id", "target_id": provider_id},
                        headers={"Authorization": f"KakaoAK {self.kakao_admin_key}"},
                    )
                elif social_type is SocialType.APPLE and authorization_code:
                    response = await self._revoke_apple(client, authorization_code)
                else:
                    logger.info(f"No provider revoke for {social_type.value}")
                    return False
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"{social_type.value} revoke failed: {e}")
            return False

        if response.status_code >= 400:
            logger.error(
                f"{social_type.value} revoke rejected with status {response.status_code}",
                extra={"status_code": response.status_code},
            )
            return False
        return True

    async def _revoke_apple(
        self, client: httpx.AsyncClient, authorization_code: str,
    ) -> httpx.Response:
        """Exchange the authorization code for a refresh token, then revoke it."""
        credentials = {
            "client_id": self.apple_client_id,
            "client_secret": self.apple_client_secret,
        }
        token_response = await client.post(
            APPLE_TOKEN_URL,
            data={
                **credentials,
                "code": authorization_code,
                "grant_type": "authorization_code",
            },
        )
        if token_response.status_code >= 400:
            return token_response
        refresh_token = token_response.json().get("refresh_token", "")
        return await client.post(
            APPLE_REVOKE_URL,
            data={
                **credentials,
                "token": refresh_token,
                "token_type_hint": "refresh_token",
            },
        )
