# shopfront/state/auth.py

"""Authentication state machine."""

import asyncio
from dataclasses import dataclass, field

from shopfront.gateway.errors import GatewayError, Unauthorized
from shopfront.gateway.http_gateway import HttpGateway
from shopfront.models.session import Session
from shopfront.state.store import Reducer
from shopfront.storage.token_store import KeyValueStore


# --- States ---------------------------------------------------------------


@dataclass(frozen=True)
class AuthState:
    """Base for every auth snapshot."""

    @property
    def is_authenticated(self) -> bool:
        return False


@dataclass(frozen=True)
class AuthUnknown(AuthState):
    """Start-up state, before ``CheckStatus`` has run."""


@dataclass(frozen=True)
class Authenticated(AuthState):
    session: Session
    username: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return True


@dataclass(frozen=True)
class Unauthenticated(AuthState):
    pass


@dataclass(frozen=True)
class AuthError(Unauthenticated):
    """A failed login. Still unauthenticated, with the reason attached."""

    message: str = ""


# --- Events ---------------------------------------------------------------


@dataclass(frozen=True)
class CheckStatus:
    pass


@dataclass(frozen=True)
class Login:
    username: str
    password: str = field(repr=False)


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class SessionExpired:
    """The gateway gave up on the session after a failed refresh."""


@dataclass(frozen=True)
class LoadProfile:
    """Confirm the session with the server and fetch the username."""


AuthEvent = CheckStatus | Login | Logout | SessionExpired | LoadProfile


class AuthReducer(Reducer[AuthState, AuthEvent]):
    """Tracks whether a user session is established.

    ``Unknown -> Authenticated | Unauthenticated`` on ``CheckStatus``,
    ``Authenticated -> Unauthenticated`` on ``Logout`` or
    ``SessionExpired``. A failed ``Login`` lands in ``AuthError``.
    ``LoadProfile`` asks the server to confirm a restored session and
    signs out when it is rejected.
    """

    name = "auth"

    def __init__(self, gateway: HttpGateway, store: KeyValueStore) -> None:
        super().__init__(AuthUnknown())
        self.gateway = gateway
        self.store = store

    async def _reduce(self, state: AuthState, event: AuthEvent) -> AuthState:
        if isinstance(event, CheckStatus):
            return self._check_status()
        if isinstance(event, Login):
            return await self._login(event)
        if isinstance(event, LoadProfile):
            return await self._load_profile(state)
        if isinstance(event, Logout):
            self._forget_session()
            self.logger.info("Logged out")
            return Unauthenticated()
        if isinstance(event, SessionExpired):
            self._forget_session()
            self.logger.warning("Session expired, user signed out")
            return Unauthenticated()
        raise TypeError(f"Unsupported auth event: {event!r}")

    def _check_status(self) -> AuthState:
        session = Session.restore(self.store)
        if session is None:
            self.logger.info("No persisted session")
            return Unauthenticated()
        self.logger.info("Restored persisted session")
        return Authenticated(session=session)

    async def _login(self, event: Login) -> AuthState:
        """Exchange credentials for a session. Any failure clears it."""
        if not event.username.strip() or not event.password:
            self._forget_session()
            return AuthError(message="Username and password are required")
        try:
            session = await asyncio.to_thread(
                self.gateway.login, event.username, event.password
            )
        except GatewayError as exc:
            self.logger.warning(
                "Login failed for '%s': %s", event.username, exc
            )
            self._forget_session()
            return AuthError(message=str(exc))
        try:
            session.persist(self.store)
        except OSError as exc:
            self.logger.error("Could not persist session", exc_info=True)
            self._forget_session()
            return AuthError(message=f"Could not save session: {exc}")
        return Authenticated(session=session, username=event.username)

    async def _load_profile(self, state: AuthState) -> AuthState:
        if not isinstance(state, Authenticated):
            return state
        try:
            profile = await asyncio.to_thread(self.gateway.current_user)
        except Unauthorized as exc:
            self._forget_session()
            self.logger.warning("Server rejected the session: %s", exc)
            return Unauthenticated()
        except GatewayError as exc:
            # Offline: keep the restored session.
            self.logger.warning("Could not load profile: %s", exc)
            return state

        username = (
            profile.get("username") if isinstance(profile, dict) else None
        )
        # A refresh inside the gateway may have rotated the tokens.
        session = Session.restore(self.store) or state.session
        self.logger.info("Profile loaded for '%s'", username)
        return Authenticated(
            session=session,
            username=str(username) if username else state.username,
        )

    def _forget_session(self) -> None:
        """Drop persisted tokens. Storage trouble never blocks sign-out."""
        try:
            Session.clear(self.store)
        except OSError:
            self.logger.error(
                "Could not clear persisted session", exc_info=True
            )
