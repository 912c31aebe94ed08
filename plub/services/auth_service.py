"""Auth Service - social login, signup, token issue/reissue and principal resolution.

Invariants:
    - Account email is `<provider id>@<SOCIAL_TYPE>`
    - One stored refresh token per account; issue() replaces it, reissue() rotates it
    - reissue() accepts only the currently stored token (else NOT_FOUND_REFRESH_TOKEN)
    - resolve_principal: any token/account problem -> FILTER_ACCESS_DENIED;
      PAUSED/BANNED -> SUSPENDED_ACCOUNT

Design Decisions:
    - Login of an unknown identity returns a short-lived sign token (code 2001)
      instead of creating the account: signup needs the profile first
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from plub.core.domain_types import AccountStatus, Role, SocialType, TokenType
from plub.core.enforce_account import check_account_active, check_nickname_rule
from plub.core.errors import ErrorKind, PlubError
from plub.infrastructure.jwt_provider import JwtProvider, TokenPair
from plub.infrastructure.social_client import SocialClient
from plub.models.account import Account, AccountCategory, RefreshToken
from plub.models.category import SubCategory
from plub.schemas.auth import LoginRequest, SignupRequest

logger = logging.getLogger(__name__)

LOGIN_SUCCESS_CODE = 1000
SIGNUP_REQUIRED_CODE = 2001


@dataclass(frozen=True)
class LoginResult:
    """Either tokens (known account) or a sign token (signup required)."""
    status_code: int
    tokens: TokenPair | None = None
    sign_token: str | None = None


def account_email(social_type: SocialType, provider_id: str) -> str:
    return f"{provider_id}@{social_type.value}"


class AuthService:
    """Authentication flows on top of JwtProvider and the provider client."""

    def __init__(
        self, db: AsyncSession, jwt_provider: JwtProvider,
        social_client: SocialClient | None = None,
    ):
        self.db = db
        self.jwt = jwt_provider
        self.social = social_client

    async def _find_by_email(self, email: str) -> Account | None:
        result = await self.db.execute(select(Account).where(Account.email == email))
        return result.scalar_one_or_none()

    async def _store_refresh_token(self, account_id: int, token: str) -> None:
        result = await self.db.execute(
            select(RefreshToken).where(RefreshToken.account_id == account_id),
        )
        stored = result.scalar_one_or_none()
        if stored is None:
            self.db.add(RefreshToken(account_id=account_id, token=token))
        else:
            stored.token = token

    async def issue(self, account: Account) -> TokenPair:
        """Create a token pair and persist the refresh token (not committed)."""
        pair = self.jwt.create_pair(account.email, account.role)
        await self._store_refresh_token(account.id, pair.refresh_token)
        return pair

    async def reissue(self, refresh_token: str) -> TokenPair:
        email = self.jwt.email_of(refresh_token, TokenType.REFRESH)
        account = await self._find_by_email(email)
        if account is None:
            raise PlubError(ErrorKind.NOT_FOUND_ACCOUNT)

        result = await self.db.execute(
            select(RefreshToken).where(RefreshToken.account_id == account.id),
        )
        stored = result.scalar_one_or_none()
        if stored is None or stored.token != refresh_token:
            logger.warning("Refresh token not current", extra={"account_id": account.id})
            raise PlubError(ErrorKind.NOT_FOUND_REFRESH_TOKEN)

        pair = await self.issue(account)
        await self.db.commit()
        logger.info("Tokens reissued", extra={"account_id": account.id})
        return pair

    async def resolve_principal(self, access_token: str | None) -> Account:
        if not access_token:
            raise PlubError(ErrorKind.FILTER_ACCESS_DENIED)
        try:
            email = self.jwt.email_of(access_token, TokenType.ACCESS)
        except PlubError as e:
            if e.kind is ErrorKind.DECRYPTION_FAILURE:
                raise PlubError(ErrorKind.FILTER_ACCESS_DENIED)
            raise
        account = await self._find_by_email(email)
        if account is None:
            raise PlubError(ErrorKind.FILTER_ACCESS_DENIED)
        check_account_active(account.status)
        return account

    async def login(self, request: LoginRequest) -> LoginResult:
        if self.social is None:
            raise PlubError(ErrorKind.SOCIAL_LOGIN_ERROR)
        provider_id = await self.social.fetch_provider_id(
            request.social_type, request.provider_token,
        )
        email = account_email(request.social_type, provider_id)
        account = await self._find_by_email(email)

        if account is None:
            logger.info(f"Unknown {request.social_type.value} identity, signup required")
            return LoginResult(
                status_code=SIGNUP_REQUIRED_CODE,
                sign_token=self.jwt.create_sign_token(email),
            )

        check_account_active(account.status)
        account.last_login = datetime.now(timezone.utc)
        if request.fcm_token:
            account.fcm_token = request.fcm_token
        pair = await self.issue(account)
        await self.db.commit()
        logger.info("Login", extra={"account_id": account.id})
        return LoginResult(status_code=LOGIN_SUCCESS_CODE, tokens=pair)

    async def signup(self, sign_token: str | None, request: SignupRequest) -> TokenPair:
        if not sign_token:
            raise PlubError(ErrorKind.SIGNUP_TOKEN_ERROR)
        email = self.jwt.email_of(sign_token, TokenType.SIGN)
        social_name = email.rsplit("@", 1)[-1]
        try:
            social_type = SocialType(social_name)
        except ValueError:
            raise PlubError(ErrorKind.SOCIAL_TYPE_ERROR)

        if await self._find_by_email(email) is not None:
            raise PlubError(ErrorKind.EMAIL_DUPLICATION)
        check_nickname_rule(request.nickname)
        taken = await self.db.execute(
            select(Account.id).where(Account.nickname == request.nickname),
        )
        if taken.first() is not None:
            raise PlubError(ErrorKind.NICKNAME_DUPLICATION)

        sub_category_ids = list(dict.fromkeys(request.category_list))
        if sub_category_ids:
            found = await self.db.execute(
                select(SubCategory.id).where(SubCategory.id.in_(sub_category_ids)),
            )
            if len(found.all()) != len(sub_category_ids):
                raise PlubError(ErrorKind.NOT_FOUND_SUB_CATEGORY)

        account = Account(
            email=email,
            nickname=request.nickname,
            age=request.age,
            birthday=request.birthday,
            gender=request.gender,
            introduce=request.introduce,
            profile_image=request.profile_image,
            social_type=social_type.value,
            fcm_token=request.fcm_token,
            role=Role.USER.value,
            status=AccountStatus.NORMAL.value,
            last_login=datetime.now(timezone.utc),
        )
        self.db.add(account)
        await self.db.flush()
        for sub_category_id in sub_category_ids:
            self.db.add(AccountCategory(
                account_id=account.id, sub_category_id=sub_category_id,
            ))

        pair = await self.issue(account)
        await self.db.commit()
        logger.info("Signup", extra={"account_id": account.id})
        return pair

    async def logout(self, account: Account) -> None:
        await self.db.execute(
            delete(RefreshToken).where(RefreshToken.account_id == account.id),
        )
        await self.db.commit()
        logger.info("Logout", extra={"account_id": account.id})
