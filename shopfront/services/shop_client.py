# shopfront/services/shop_client.py

"""Wires the gateway, token store and reducers together."""

import logging

from shopfront.config.settings import Settings
from shopfront.gateway.http_gateway import HttpGateway
from shopfront.state.auth import AuthReducer, SessionExpired
from shopfront.state.cart import CartReducer
from shopfront.state.catalog import CatalogReducer
from shopfront.storage.token_store import JsonFileStore, KeyValueStore

logger = logging.getLogger("shopfront.client")


class ShopClient:
    """Owns one gateway and the three reducers built on it.

    Collaborators are passed in, never looked up globally; build one
    per UI or CLI run.
    """

    def __init__(
        self,
        store: KeyValueStore | None = None,
        gateway: HttpGateway | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.store: KeyValueStore = store or JsonFileStore(
            self.settings.TOKEN_STORE_PATH
        )
        self.gateway = gateway or HttpGateway(self.store, self.settings)
        self.auth = AuthReducer(self.gateway, self.store)
        self.catalog = CatalogReducer(
            self.gateway, on_unauthorized=self._expire_session
        )
        self.cart = CartReducer()
        logger.debug("ShopClient ready for %s", self.gateway.base_url)

    async def _expire_session(self) -> None:
        await self.auth.dispatch(SessionExpired())

    def close(self) -> None:
        """Release network resources."""
        self.gateway.close()
