# shopfront/state/cart.py

"""Shopping cart state and its reducer."""

from dataclasses import dataclass, field
from decimal import Decimal

from shopfront.gateway.errors import InvalidQuantity
from shopfront.models.cart_line import CartLine
from shopfront.models.product import Product
from shopfront.state.store import Reducer


@dataclass(frozen=True)
class CartState:
    """Cart snapshot: at most one line per product id, in insertion order."""

    lines: tuple[CartLine, ...] = field(default_factory=tuple)

    @property
    def total(self) -> Decimal:
        """Sum of all line totals, recomputed on every read."""
        return sum((line.line_total for line in self.lines), Decimal("0"))

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def line_for(self, product_id: int) -> CartLine | None:
        for line in self.lines:
            if line.product.id == product_id:
                return line
        return None


# --- Events ---------------------------------------------------------------


@dataclass(frozen=True)
class AddToCart:
    product: Product
    quantity: int = 1


@dataclass(frozen=True)
class RemoveFromCart:
    product_id: int


@dataclass(frozen=True)
class UpdateQuantity:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


CartEvent = AddToCart | RemoveFromCart | UpdateQuantity | ClearCart


def reduce_cart(state: CartState, event: CartEvent) -> CartState:
    """Pure cart transition.

    Raises:
        InvalidQuantity: ``AddToCart`` with a quantity below 1.
    """
    if isinstance(event, AddToCart):
        if event.quantity <= 0:
            raise InvalidQuantity(
                f"Cannot add {event.quantity} of product {event.product.id}"
            )
        existing = state.line_for(event.product.id)
        if existing is None:
            return CartState(
                lines=state.lines + (CartLine(event.product, event.quantity),)
            )
        return CartState(
            lines=tuple(
                line.with_quantity(line.quantity + event.quantity)
                if line is existing
                else line
                for line in state.lines
            )
        )

    if isinstance(event, RemoveFromCart):
        return CartState(
            lines=tuple(
                line
                for line in state.lines
                if line.product.id != event.product_id
            )
        )

    if isinstance(event, UpdateQuantity):
        if event.quantity <= 0:
            return reduce_cart(state, RemoveFromCart(event.product_id))
        return CartState(
            lines=tuple(
                line.with_quantity(event.quantity)
                if line.product.id == event.product_id
                else line
                for line in state.lines
            )
        )

    if isinstance(event, ClearCart):
        return CartState()

    raise TypeError(f"Unsupported cart event: {event!r}")


class CartReducer(Reducer[CartState, CartEvent]):
    """Owns the cart lines. Never touches the network."""

    name = "cart"

    def __init__(self, initial: CartState | None = None) -> None:
        super().__init__(initial or CartState())

    async def _reduce(self, state: CartState, event: CartEvent) -> CartState:
        new_state = reduce_cart(state, event)
        self.logger.info(
            "%s -> %d lines, total %s",
            type(event).__name__,
            len(new_state.lines),
            new_state.total,
        )
        return new_state
