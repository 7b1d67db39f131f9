# mercury/services/auth/service.py
from __future__ import annotations

import logging
from uuid import uuid4

from sqlalchemy.exc import IntegrityError

from mercury.models.user import User
from mercury.repositories.account import AccountRepository
from mercury.services._shared.base import BaseService
from mercury.services._shared.errors import (
    AuthenticationError,
    ConfigurationError,
    ErrorCode,
    MalformedTokenError,
)
from mercury.services._shared.ports import (
    Clock,
    PasswordHasher,
    SignedToken,
    SystemClock,
    TokenClaims,
    TokenCodec,
)
from mercury.services.auth.dto import (
    AuthenticationOut,
    AuthSettings,
    IntrospectIn,
    IntrospectOut,
    LoginIn,
    LogoutIn,
    RegisterIn,
)

log = logging.getLogger(__name__)


class AuthenticationService(BaseService):
    """
    Stateless token authentication (register / login / introspect / logout).

    Tokens are HS512-signed and never stored server-side. Every token has
    two validity windows measured from its ``iat``:

    * access window ``[iat, exp)``, checked by :meth:`introspect`;
    * refresh window ``[iat, iat + refresh_validity)``, checked by
      :meth:`logout` so a client whose access token just lapsed can still log
      out cleanly.
    """

    def __init__(
        self,
        *,
        settings: AuthSettings,
        password_hasher: PasswordHasher,
        token_codec: TokenCodec,
        clock: Clock | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param settings: Immutable signing key and validity windows.
        :param password_hasher: Adapter hashing and verifying passwords.
        :param token_codec: Adapter issuing, parsing and verifying tokens.
        :param clock: Time source (defaults to the UTC wall clock).
        """
        self.settings = settings
        self.passwords = password_hasher
        self.tokens = token_codec
        self.clock = clock or SystemClock()

    # ------------------------------------------------------------------ #
    # Register
    # ------------------------------------------------------------------ #

    def register(self, dto: RegisterIn) -> AuthenticationOut:
        """
        Create an inactive account with the default role and issue a token.

        Uniqueness is checked in a fixed order (email, phone, user name) and
        the first violation wins. Checks, insert and token issuance share one
        read-write unit of work.

        :param dto: Registration input.
        :returns: Token for the new account.
        :raises AuthenticationError: ``EMAIL_TAKEN``, ``PHONE_TAKEN`` or
            ``USER_EXISTED``.
        :raises ConfigurationError: If the default role row is missing.
        """
        user_name = dto.user_name.strip()
        email = dto.email.strip()
        phone = dto.phone.strip()

        try:
            with self.rw_uow() as uow:
                repo: AccountRepository = uow.accounts

                if repo.exists_by_email(email):
                    raise AuthenticationError(ErrorCode.EMAIL_TAKEN)
                if repo.exists_by_phone(phone):
                    raise AuthenticationError(ErrorCode.PHONE_TAKEN)
                if repo.exists_by_user_name(user_name):
                    raise AuthenticationError(ErrorCode.USER_EXISTED)

                role = uow.roles.get(self.settings.default_role_id)
                if role is None:
                    raise ConfigurationError(
                        f"Default role {self.settings.default_role_id} is not configured."
                    )

                user = repo.model(
                    user_name=user_name,
                    email=email,
                    phone=phone,
                    password_hash=self.passwords.hash(dto.password),
                    full_name=dto.full_name,
                    address=dto.address,
                    status=False,
                    role=role,
                )
                repo.add(user)
                token = self._issue_token(user)
        except IntegrityError as exc:
            # A concurrent registration won the race on one of the unique columns
            log.warning("auth.register.race", extra={"user_name": user_name})
            raise AuthenticationError(ErrorCode.USER_EXISTED) from exc

        log.info("auth.register", extra={"user_name": user_name})
        return AuthenticationOut(token=token)

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn) -> AuthenticationOut:
        """
        Authenticate an identifier (user name, email or phone) and password.

        .. note::
           The account ``status`` flag is not consulted.

        :param dto: Login input.
        :returns: Freshly issued token.
        :raises AuthenticationError: ``UNABLE_TO_LOGIN`` or ``PASSWORD_NOT_CORRECT``.
        """
        identifier = dto.user_name.strip()

        with self.ro_uow() as uow:
            repo: AccountRepository = uow.accounts
            user = repo.find_by_identifier(identifier)
            if user is None:
                log.info("auth.login.unknown_identifier")
                raise AuthenticationError(ErrorCode.UNABLE_TO_LOGIN)

            if not self.passwords.verify(dto.password, user.password_hash):
                log.info("auth.login.bad_password", extra={"user_name": user.user_name})
                raise AuthenticationError(ErrorCode.PASSWORD_NOT_CORRECT)

            token = self._issue_token(user)

        return AuthenticationOut(token=token)

    # ------------------------------------------------------------------ #
    # Introspect / Logout
    # ------------------------------------------------------------------ #

    def introspect(self, dto: IntrospectIn) -> IntrospectOut:
        """
        Report whether a token is correctly signed and inside its access window.

        Never raises for bad tokens: unsigned, expired and structurally broken
        tokens all yield ``valid=False``.
        """
        try:
            self.verify_token(dto.token, is_refresh=False)
        except (AuthenticationError, MalformedTokenError):
            return IntrospectOut(valid=False)
        return IntrospectOut(valid=True)

    def logout(self, dto: LogoutIn) -> None:
        """
        Log a logout for a token still inside its refresh window.

        Nothing is persisted; the token stays cryptographically valid until it
        expires naturally.

        :raises MalformedTokenError: If the token cannot be parsed.
        """
        try:
            signed = self.verify_token(dto.token, is_refresh=True)
        except AuthenticationError:
            log.info("Token already expired")
            return

        jti = signed.claims.token_id
        log.info("User logged out with token ID: %s", jti, extra={"jti": jti})

    # ------------------------------------------------------------------ #
    # Token helpers
    # ------------------------------------------------------------------ #

    def verify_token(self, token: str, *, is_refresh: bool) -> SignedToken:
        """
        Parse ``token`` and check its MAC against the applicable window.

        :param token: Compact signed token.
        :param is_refresh: Use the refresh window (``iat + refresh_validity``)
            instead of ``exp``.
        :returns: Parsed token.
        :raises AuthenticationError: ``UNAUTHENTICATED`` when the signature is
            wrong or the window has closed.
        :raises MalformedTokenError: On structural errors.
        """
        signed = self.tokens.parse(token)
        verified = self.tokens.verify(signed)

        claims = signed.claims
        if is_refresh:
            try:
                valid_until = claims.issued_at + self.settings.refresh_validity
            except OverflowError as exc:
                raise MalformedTokenError("Token issue time is out of range.") from exc
        else:
            valid_until = claims.expires_at

        if not (verified and valid_until > self.clock.now()):
            raise AuthenticationError(ErrorCode.UNAUTHENTICATED)
        return signed

    def _issue_token(self, user: User) -> str:
        """Sign a fresh access token for ``user`` (new ``jti`` every call)."""
        # NumericDate claims are whole seconds
        issued_at = self.clock.now().replace(microsecond=0)
        claims = TokenClaims(
            subject=user.user_name,
            issuer=self.settings.issuer,
            issued_at=issued_at,
            expires_at=issued_at + self.settings.access_validity,
            token_id=str(uuid4()),
            scope=user.scope,
        )
        return self.tokens.issue(claims)
