# shopfront/models/session.py

"""Client-side record of an authenticated session."""

from dataclasses import dataclass
from typing import TYPE_CHECKING

from shopfront.config.settings import Settings

if TYPE_CHECKING:
    from shopfront.storage.token_store import KeyValueStore


@dataclass(frozen=True)
class Session:
    """A bearer token and, when the API issued one, a refresh token."""

    token: str
    refresh_token: str | None = None

    @classmethod
    def restore(cls, store: "KeyValueStore") -> "Session | None":
        """Rebuild the session persisted in ``store``, if any."""
        token = store.get(Settings.TOKEN_KEY)
        if not token:
            return None
        return cls(
            token=token,
            refresh_token=store.get(Settings.REFRESH_TOKEN_KEY),
        )

    def persist(self, store: "KeyValueStore") -> None:
        """Write both tokens to ``store``."""
        store.set(Settings.TOKEN_KEY, self.token)
        if self.refresh_token:
            store.set(Settings.REFRESH_TOKEN_KEY, self.refresh_token)
        else:
            store.remove(Settings.REFRESH_TOKEN_KEY)

    @staticmethod
    def clear(store: "KeyValueStore") -> None:
        """Forget any persisted session."""
        store.remove(Settings.TOKEN_KEY)
        store.remove(Settings.REFRESH_TOKEN_KEY)
