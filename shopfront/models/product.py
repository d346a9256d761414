# shopfront/models/product.py

"""Product and review models built from catalog API payloads."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any

from shopfront.gateway.errors import InvalidPayload


@dataclass(frozen=True)
class Review:
    """A single customer review attached to a product."""

    rating: int
    comment: str | None = None
    reviewer_name: str = ""

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Review":
        """Build a Review from one entry of a product's ``reviews``."""
        if not isinstance(payload, dict):
            raise InvalidPayload(
                f"Review payload must be an object, got {type(payload).__name__}"
            )
        try:
            rating = int(payload.get("rating", 0))
        except (TypeError, ValueError) as exc:
            raise InvalidPayload(
                f"Review rating is not an integer: {payload.get('rating')!r}"
            ) from exc
        comment = payload.get("comment")
        return cls(
            rating=rating,
            comment=str(comment) if comment is not None else None,
            reviewer_name=str(payload.get("reviewerName", "")),
        )


@dataclass(frozen=True)
class Product:
    """A catalog product as served by the remote API.

    Instances are shared by reference between the catalog cache and
    cart lines, so they are frozen.
    """

    id: int
    title: str
    price: Decimal
    description: str = ""
    category: str = ""
    images: tuple[str, ...] = field(default_factory=tuple)
    reviews: tuple[Review, ...] = field(default_factory=tuple)

    @property
    def average_rating(self) -> float:
        """Mean review rating, or 0.0 when there are no reviews."""
        if not self.reviews:
            return 0.0
        return sum(r.rating for r in self.reviews) / len(self.reviews)

    @classmethod
    def from_api(cls, payload: dict[str, Any]) -> "Product":
        """Build a Product from a ``/products`` JSON object.

        Raises:
            InvalidPayload: when ``id``/``title`` are missing or the
                price is not a non-negative number.
        """
        if not isinstance(payload, dict):
            raise InvalidPayload(
                f"Product payload must be an object, got {type(payload).__name__}"
            )
        if "id" not in payload or not payload.get("title"):
            raise InvalidPayload("Product payload missing id or title")

        try:
            product_id = int(payload["id"])
        except (TypeError, ValueError) as exc:
            raise InvalidPayload(
                f"Product id is not an integer: {payload['id']!r}"
            ) from exc

        try:
            price = Decimal(str(payload.get("price", 0)))
        except InvalidOperation as exc:
            raise InvalidPayload(
                f"Product {product_id} has a non-numeric price"
            ) from exc
        if not price.is_finite() or price < 0:
            raise InvalidPayload(
                f"Product {product_id} has an invalid price: {price}"
            )

        images = payload.get("images") or []
        if not isinstance(images, list):
            raise InvalidPayload(f"Product {product_id} images is not a list")
        if not images and payload.get("thumbnail"):
            images = [payload["thumbnail"]]

        reviews = payload.get("reviews") or []
        if not isinstance(reviews, list):
            raise InvalidPayload(f"Product {product_id} reviews is not a list")

        return cls(
            id=product_id,
            title=str(payload["title"]),
            price=price,
            description=str(payload.get("description", "")),
            category=str(payload.get("category", "")),
            images=tuple(str(url) for url in images),
            reviews=tuple(Review.from_api(r) for r in reviews),
        )
