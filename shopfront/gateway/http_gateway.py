# shopfront/gateway/http_gateway.py

"""The single component that talks to the remote shop API."""

import logging
import threading
import urllib.parse
from typing import Any

from curl_cffi import requests as curl_requests
from curl_cffi.requests.exceptions import RequestException, Timeout

from shopfront.config.settings import Settings
from shopfront.gateway.errors import (
    GatewayError,
    InvalidPayload,
    NetworkTimeout,
    NotFound,
    Unauthorized,
    UnknownGatewayError,
)
from shopfront.models.product import Product
from shopfront.models.session import Session
from shopfront.storage.token_store import KeyValueStore


class HttpGateway:
    """JSON-over-HTTP client for the catalog and auth endpoints.

    Attaches the persisted bearer token to authenticated calls. A 401
    on such a call triggers exactly one token refresh and, if that
    works, exactly one retry of the original request. Nothing else is
    retried.
    """

    def __init__(
        self,
        store: KeyValueStore,
        settings: Settings | None = None,
    ) -> None:
        self.logger = logging.getLogger("shopfront.gateway")
        self.settings = settings or Settings()
        self.store = store
        self.base_url: str = self.settings.API_BASE_URL
        self.session = curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._timeout: tuple[float, float] = (
            self.settings.CONNECT_TIMEOUT,
            self.settings.RESPONSE_TIMEOUT,
        )
        # curl handles are not safe to share across threads
        self._lock = threading.Lock()

    # ── Transport ────────────────────────────────────────

    def _send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None,
        token: str | None,
    ) -> curl_requests.Response:
        """Issue one HTTP request, translating transport failures."""
        headers = dict(self.settings.DEFAULT_HEADERS)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        url = f"{self.base_url}/{path.lstrip('/')}"

        try:
            with self._lock:
                resp = self.session.request(
                    method,
                    url,
                    headers=headers,
                    json=body,
                    timeout=self._timeout,
                )
        except Timeout as exc:
            self.logger.warning("%s %s timed out: %s", method, path, exc)
            raise NetworkTimeout(
                f"{method} {path} timed out"
            ) from exc
        except RequestException as exc:
            self.logger.error(
                "%s %s failed: %s", method, path, exc, exc_info=True
            )
            raise UnknownGatewayError(
                f"{method} {path} failed: {exc}"
            ) from exc

        self.logger.debug(
            "%s %s -> HTTP %d", method, path, resp.status_code
        )
        return resp

    @staticmethod
    def _error_message(resp: curl_requests.Response) -> str:
        """Pull the API's ``message`` field out of an error response."""
        try:
            payload = resp.json()
        except ValueError:
            return f"HTTP {resp.status_code}"
        if isinstance(payload, dict) and payload.get("message"):
            return str(payload["message"])
        return f"HTTP {resp.status_code}"

    def _decode(
        self, method: str, path: str, resp: curl_requests.Response,
    ) -> Any:
        """Return the JSON body of a 2xx response or raise."""
        status = resp.status_code
        if 200 <= status < 300:
            try:
                return resp.json()
            except ValueError as exc:
                raise UnknownGatewayError(
                    f"{method} {path} returned invalid JSON", status
                ) from exc

        message = self._error_message(resp)
        if status == 401:
            raise Unauthorized(message, status)
        if status == 404:
            raise NotFound(message, status)
        self.logger.warning(
            "%s %s -> HTTP %d: %s", method, path, status, message
        )
        raise UnknownGatewayError(message, status)

    # ── Public contract ──────────────────────────────────

    def request(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        requires_auth: bool = False,
    ) -> Any:
        """Send a request and return its decoded JSON body.

        Raises:
            NetworkTimeout: connect or response timeout exceeded.
            Unauthorized: 401 that one refresh could not fix. The
                persisted session is cleared first.
            NotFound: HTTP 404.
            UnknownGatewayError: anything else.
        """
        token = self.store.get(Settings.TOKEN_KEY) if requires_auth else None
        resp = self._send(method, path, body, token)

        if resp.status_code == 401 and requires_auth:
            self.logger.info(
                "%s %s unauthorized, attempting token refresh",
                method,
                path,
            )
            if not self.refresh():
                Session.clear(self.store)
                raise Unauthorized(
                    "Session expired, please log in again", 401
                )
            token = self.store.get(Settings.TOKEN_KEY)
            resp = self._send(method, path, body, token)
            if resp.status_code == 401:
                self.logger.warning(
                    "%s %s still unauthorized after refresh",
                    method,
                    path,
                )
                Session.clear(self.store)
                raise Unauthorized(self._error_message(resp), 401)

        return self._decode(method, path, resp)

    def refresh(self) -> bool:
        """Exchange the persisted refresh token for a new session.

        Returns True and persists the new tokens on success.
        """
        refresh_token = self.store.get(Settings.REFRESH_TOKEN_KEY)
        if not refresh_token:
            self.logger.info("No refresh token stored, cannot refresh")
            return False
        try:
            resp = self._send(
                "POST",
                "/auth/refresh",
                {
                    "refreshToken": refresh_token,
                    "expiresInMins": self.settings.TOKEN_EXPIRES_MINS,
                },
                None,
            )
            payload = self._decode("POST", "/auth/refresh", resp)
        except GatewayError as exc:
            self.logger.warning("Token refresh failed: %s", exc)
            return False

        new_session = _session_from_payload(payload, refresh_token)
        if new_session is None:
            self.logger.warning("Token refresh returned no access token")
            return False
        new_session.persist(self.store)
        self.logger.info("Access token refreshed")
        return True

    def close(self) -> None:
        """Release the underlying curl session."""
        self.session.close()

    # ── Auth endpoints ───────────────────────────────────

    def login(self, username: str, password: str) -> Session:
        """Authenticate and return the issued session (not persisted)."""
        payload = self.request(
            "POST",
            "/auth/login",
            {
                "username": username,
                "password": password,
                "expiresInMins": self.settings.TOKEN_EXPIRES_MINS,
            },
        )
        session = _session_from_payload(payload, None)
        if session is None:
            raise UnknownGatewayError("Login response carried no token")
        self.logger.info("Logged in as '%s'", username)
        return session

    def current_user(self) -> dict[str, Any]:
        """Return the profile of the authenticated user."""
        payload: dict[str, Any] = self.request(
            "GET", "/auth/me", requires_auth=True
        )
        return payload

    # ── Catalog endpoints ────────────────────────────────

    def fetch_products(
        self, limit: int | None = None, skip: int = 0,
    ) -> list[Product]:
        """Fetch one page of the product listing."""
        page_limit = (
            self.settings.CATALOG_PAGE_LIMIT if limit is None else limit
        )
        payload = self.request(
            "GET", f"/products?limit={page_limit}&skip={skip}"
        )
        return self._parse_products(payload)

    def fetch_product(self, product_id: int) -> Product:
        """Fetch a single product by id."""
        payload = self.request("GET", f"/products/{product_id}")
        return Product.from_api(payload)

    def fetch_categories(self) -> list[str]:
        """Fetch category slugs.

        Older API versions return plain strings, newer ones return
        objects with ``slug`` and ``name``.
        """
        payload = self.request("GET", "/products/categories")
        if not isinstance(payload, list):
            raise InvalidPayload("Category listing is not a list")
        slugs: list[str] = []
        for item in payload:
            if isinstance(item, dict):
                slug = item.get("slug") or item.get("name")
                if slug:
                    slugs.append(str(slug))
            elif item:
                slugs.append(str(item))
        return slugs

    def fetch_products_by_category(self, category: str) -> list[Product]:
        """Fetch every product in one category."""
        slug = urllib.parse.quote(category, safe="")
        payload = self.request("GET", f"/products/category/{slug}")
        return self._parse_products(payload)

    def search_products(self, query: str) -> list[Product]:
        """Full-text product search."""
        payload = self.request(
            "GET", f"/products/search?q={urllib.parse.quote(query, safe='')}"
        )
        return self._parse_products(payload)

    def _parse_products(self, payload: Any) -> list[Product]:
        """Turn a listing payload into Products, dropping bad entries."""
        if isinstance(payload, dict):
            items = payload.get("products", [])
        else:
            items = payload
        if not isinstance(items, list):
            raise InvalidPayload("Product listing is not a list")

        products: list[Product] = []
        dropped = 0
        for item in items:
            try:
                products.append(Product.from_api(item))
            except InvalidPayload as exc:
                self.logger.debug("Dropped product payload: %s", exc)
                dropped += 1
        if dropped:
            self.logger.info(
                "Dropped %d invalid products from listing", dropped
            )
        return products


def _session_from_payload(
    payload: Any, fallback_refresh: str | None,
) -> Session | None:
    """Read ``accessToken``/``token`` and ``refreshToken`` from a reply."""
    if not isinstance(payload, dict):
        return None
    token = payload.get("accessToken") or payload.get("token")
    if not token:
        return None
    return Session(
        token=str(token),
        refresh_token=payload.get("refreshToken") or fallback_refresh,
    )
