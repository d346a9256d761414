# shopfront/state/catalog.py

"""Catalog query cache: the last result of each kind of catalog load."""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

from shopfront.gateway.errors import ShopError, Unauthorized
from shopfront.gateway.http_gateway import HttpGateway
from shopfront.models.product import Product
from shopfront.state.store import Reducer


@dataclass(frozen=True)
class CatalogState:
    """Cached catalog results keyed by query intent.

    ``loading`` names the query in flight; ``error`` holds the message
    of the last failed load. A failure never wipes cached results.
    """

    products: tuple[Product, ...] = field(default_factory=tuple)
    product: Product | None = None
    categories: tuple[str, ...] = field(default_factory=tuple)
    category_products: Mapping[str, tuple[Product, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    search_query: str = ""
    search_results: tuple[Product, ...] = field(default_factory=tuple)
    loading: str | None = None
    error: str | None = None

    def find(self, product_id: int) -> Product | None:
        """Return the cached Product with ``product_id``, if any."""
        if self.product is not None and self.product.id == product_id:
            return self.product
        pools = [self.products, self.search_results]
        pools.extend(self.category_products.values())
        for pool in pools:
            for product in pool:
                if product.id == product_id:
                    return product
        return None


# --- Events ---------------------------------------------------------------


@dataclass(frozen=True)
class LoadProducts:
    limit: int | None = None
    skip: int = 0


@dataclass(frozen=True)
class LoadProduct:
    product_id: int


@dataclass(frozen=True)
class LoadCategories:
    pass


@dataclass(frozen=True)
class LoadCategory:
    category: str


@dataclass(frozen=True)
class SearchProducts:
    query: str


CatalogEvent = (
    LoadProducts | LoadProduct | LoadCategories | LoadCategory | SearchProducts
)


class CatalogReducer(Reducer[CatalogState, CatalogEvent]):
    """Fetches catalog data through the gateway and caches the last result.

    There is no TTL and no invalidation: every load re-fetches and
    replaces its slot. Loads are not deduplicated or cancelled; they
    run in the order they were dispatched.
    """

    name = "catalog"

    def __init__(
        self,
        gateway: HttpGateway,
        on_unauthorized: Callable[[], Awaitable[Any]] | None = None,
    ) -> None:
        super().__init__(CatalogState())
        self.gateway = gateway
        self.on_unauthorized = on_unauthorized

    def _plan(
        self, event: CatalogEvent,
    ) -> tuple[
        str,
        Callable[[], Any],
        Callable[[CatalogState, Any], CatalogState],
    ]:
        """Return the cache key, the fetch call and the result writer."""
        gw = self.gateway
        if isinstance(event, LoadProducts):
            return (
                "products",
                lambda: gw.fetch_products(event.limit, event.skip),
                lambda s, r: replace(s, products=tuple(r)),
            )
        if isinstance(event, LoadProduct):
            return (
                f"product:{event.product_id}",
                lambda: gw.fetch_product(event.product_id),
                lambda s, r: replace(s, product=r),
            )
        if isinstance(event, LoadCategories):
            return (
                "categories",
                gw.fetch_categories,
                lambda s, r: replace(s, categories=tuple(r)),
            )
        if isinstance(event, LoadCategory):
            return (
                f"category:{event.category}",
                lambda: gw.fetch_products_by_category(event.category),
                lambda s, r: replace(
                    s,
                    category_products=MappingProxyType(
                        {**s.category_products, event.category: tuple(r)}
                    ),
                ),
            )
        if isinstance(event, SearchProducts):
            return (
                f"search:{event.query}",
                lambda: gw.search_products(event.query),
                lambda s, r: replace(
                    s, search_query=event.query, search_results=tuple(r)
                ),
            )
        raise TypeError(f"Unsupported catalog event: {event!r}")

    async def _reduce(
        self, state: CatalogState, event: CatalogEvent,
    ) -> CatalogState:
        key, fetch, write = self._plan(event)
        self._publish(replace(state, loading=key, error=None))

        try:
            result = await asyncio.to_thread(fetch)
        except Unauthorized as exc:
            self.logger.warning("Load '%s' unauthorized: %s", key, exc)
            if self.on_unauthorized is not None:
                await self.on_unauthorized()
            return replace(state, loading=None, error=str(exc))
        except ShopError as exc:
            self.logger.warning("Load '%s' failed: %s", key, exc)
            return replace(state, loading=None, error=str(exc))

        self.logger.info("Loaded '%s'", key)
        return write(replace(state, loading=None, error=None), result)
