# shopfront/models/cart_line.py

"""Cart line model."""

from dataclasses import dataclass, replace
from decimal import Decimal

from shopfront.models.product import Product


@dataclass(frozen=True)
class CartLine:
    """One product in the cart and how many of it.

    ``product`` is the catalog's own instance, never a copy.
    """

    product: Product
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def with_quantity(self, quantity: int) -> "CartLine":
        """Return a copy of this line holding ``quantity`` units."""
        return replace(self, quantity=quantity)
