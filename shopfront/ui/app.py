# shopfront/ui/app.py

"""Terminal UI for browsing the catalog and managing the cart."""

import logging
from collections.abc import Callable
from typing import cast

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widgets import (
    Button,
    DataTable,
    Footer,
    Header,
    Input,
    OptionList,
    Static,
)
from textual.widgets.option_list import Option

from shopfront.models.product import Product
from shopfront.services.shop_client import ShopClient
from shopfront.state.auth import (
    AuthError,
    AuthState,
    AuthUnknown,
    Authenticated,
    CheckStatus,
    LoadProfile,
    Login,
    Logout,
)
from shopfront.state.cart import (
    AddToCart,
    CartState,
    ClearCart,
    RemoveFromCart,
    UpdateQuantity,
)
from shopfront.state.catalog import (
    CatalogState,
    LoadCategories,
    LoadCategory,
    LoadProducts,
    SearchProducts,
)

logger = logging.getLogger("shopfront.ui")


class ShopfrontApp(App[object]):
    """Catalog table, cart and login bar, rendered from reducer snapshots."""

    DEFAULT_CSS = """
    #auth_bar, #search_bar { height: auto; }
    #auth_bar Input { width: 1fr; }
    #search_input { width: 1fr; }
    #panes { height: 1fr; }
    #category_list { width: 24; }
    #products_table { width: 2fr; }
    #cart_pane { width: 1fr; }
    #cart_total { padding: 0 1; text-style: bold; }
    """

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("ctrl+a", "add_to_cart", "Add"),
        Binding("ctrl+d", "remove_from_cart", "Remove"),
        Binding("ctrl+u", "increment", "+1"),
        Binding("ctrl+x", "clear_cart", "Clear Cart"),
        Binding("ctrl+r", "reload", "Reload"),
        Binding("ctrl+l", "logout", "Logout"),
    ]

    def __init__(self, client: ShopClient | None = None) -> None:
        super().__init__()
        self.client = client or ShopClient()
        self.visible_products: list[Product] = []
        self.showing_search: bool = False
        self.selected_category: str | None = None
        self._listed_categories: tuple[str, ...] = ()
        self._unsubscribers: list[Callable[[], None]] = []

    def compose(self) -> ComposeResult:
        """Build the widget tree for the TUI."""
        yield Header()
        yield Container(
            Horizontal(
                Input(placeholder="Username", id="username"),
                Input(placeholder="Password", password=True, id="password"),
                Button("Login", variant="primary", id="login_btn"),
                Button("Logout", id="logout_btn"),
                id="auth_bar",
            ),
            Static("Checking session...", id="auth_status"),
            Horizontal(
                Input(placeholder="Search products...", id="search_input"),
                Button("Search", variant="primary", id="search_btn"),
                id="search_bar",
            ),
            Static("Ready", id="status"),
            Horizontal(
                OptionList(
                    Option("All products", id="all"), id="category_list"
                ),
                cast(
                    DataTable[str | Text],
                    DataTable(
                        id="products_table",
                        zebra_stripes=True,
                        cursor_type="row",
                    ),
                ),
                Vertical(
                    cast(
                        DataTable[str | Text],
                        DataTable(id="cart_table", cursor_type="row"),
                    ),
                    Static("Total: $0.00", id="cart_total"),
                    id="cart_pane",
                ),
                id="panes",
            ),
            id="main_container",
        )
        yield Footer()

    def _table(self, selector: str) -> DataTable[str | Text]:
        return cast(
            DataTable[str | Text], self.query_one(selector, DataTable)
        )

    async def on_mount(self) -> None:
        """Set up tables, subscribe to state, then load initial data."""
        self._table("#products_table").add_columns(
            "ID", "Title", "Price", "Category"
        )
        self._table("#cart_table").add_columns("Item", "Qty", "Total")

        self._unsubscribers = [
            self.client.auth.subscribe(self.render_auth),
            self.client.catalog.subscribe(self.render_catalog),
            self.client.cart.subscribe(self.render_cart),
        ]

        await self.client.auth.dispatch(CheckStatus())
        await self.client.catalog.dispatch(LoadCategories())
        await self.client.catalog.dispatch(LoadProducts())
        await self.client.auth.dispatch(LoadProfile())

    def on_unmount(self) -> None:
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()

    # ── Rendering (snapshot -> widgets) ──────────────────

    def render_auth(self, state: AuthState) -> None:
        label = self.query_one("#auth_status", Static)
        if isinstance(state, Authenticated):
            who = state.username or "restored session"
            label.update(f"🔓 Signed in ({who})")
        elif isinstance(state, AuthError):
            label.update(f"❌ {state.message}")
            self.notify(state.message, severity="error")
        elif isinstance(state, AuthUnknown):
            label.update("Checking session...")
        else:
            label.update("🔒 Not signed in")

    def render_catalog(self, state: CatalogState) -> None:
        status = self.query_one("#status", Static)
        if state.loading:
            status.update(f"🔍 Loading {state.loading}...")
            return

        self.populate_categories(state.categories)
        if self.showing_search:
            self.visible_products = list(state.search_results)
        elif self.selected_category is not None:
            self.visible_products = list(
                state.category_products.get(self.selected_category, ())
            )
        else:
            self.visible_products = list(state.products)

        if state.error:
            status.update(f"❌ {state.error}")
            self.notify(state.error, severity="error")
        elif not self.visible_products:
            status.update("No products found")
        else:
            status.update(f"✅ {len(self.visible_products)} products")
        self.populate_products()

    def populate_categories(self, categories: tuple[str, ...]) -> None:
        """Rebuild the category list when the cached slugs change."""
        if categories == self._listed_categories:
            return
        self._listed_categories = categories
        option_list = self.query_one("#category_list", OptionList)
        option_list.clear_options()
        option_list.add_options(
            [Option("All products", id="all")]
            + [Option(slug.replace("-", " ").title()) for slug in categories]
        )

    def populate_products(self) -> None:
        """Fill the products table from ``visible_products``."""
        table = self._table("#products_table")
        table.clear()
        for p in self.visible_products:
            table.add_row(
                str(p.id),
                p.title[:50],
                Text(f"${p.price:,.2f}", style="green"),
                p.category,
            )

    def render_cart(self, state: CartState) -> None:
        table = self._table("#cart_table")
        table.clear()
        for line in state.lines:
            table.add_row(
                line.product.title[:30],
                str(line.quantity),
                f"${line.line_total:,.2f}",
            )
        self.query_one("#cart_total", Static).update(
            f"Total: ${state.total:,.2f} ({state.item_count} items)"
        )

    # ── Events ───────────────────────────────────────────

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        """Handle button click events."""
        if event.button.id == "search_btn":
            await self.perform_search()
        elif event.button.id == "login_btn":
            await self.perform_login()
        elif event.button.id == "logout_btn":
            await self.action_logout()

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Handle Enter in the search or password input."""
        if event.input.id == "search_input":
            await self.perform_search()
        elif event.input.id == "password":
            await self.perform_login()

    async def on_option_list_option_selected(
        self, event: OptionList.OptionSelected,
    ) -> None:
        """Show the picked category, or the full listing for the first row."""
        index = event.option_index
        if index == 0:
            await self.select_category(None)
        elif index - 1 < len(self._listed_categories):
            await self.select_category(self._listed_categories[index - 1])

    async def select_category(self, category: str | None) -> None:
        self.query_one("#search_input", Input).value = ""
        self.showing_search = False
        self.selected_category = category
        if category is None:
            await self.client.catalog.dispatch(LoadProducts())
        else:
            await self.client.catalog.dispatch(LoadCategory(category))

    async def perform_search(self) -> None:
        """Search the catalog, or reload everything for an empty query."""
        query = self.query_one("#search_input", Input).value.strip()
        self.selected_category = None
        if not query:
            self.showing_search = False
            await self.client.catalog.dispatch(LoadProducts())
            return
        self.showing_search = True
        await self.client.catalog.dispatch(SearchProducts(query))

    async def perform_login(self) -> None:
        username = self.query_one("#username", Input).value.strip()
        password_input = self.query_one("#password", Input)
        if not username or not password_input.value:
            self.notify(
                "Enter a username and password", severity="warning"
            )
            return
        await self.client.auth.dispatch(
            Login(username, password_input.value)
        )
        password_input.value = ""

    def _selected_product(self) -> Product | None:
        row = self._table("#products_table").cursor_row
        if 0 <= row < len(self.visible_products):
            return self.visible_products[row]
        return None

    async def action_add_to_cart(self) -> None:
        """Add one unit of the highlighted product."""
        product = self._selected_product()
        if product is None:
            self.notify("Select a product first", severity="warning")
            return
        await self.client.cart.dispatch(AddToCart(product))
        logger.debug("Added product %d from the catalog table", product.id)
        self.notify(f"Added {product.title}")

    async def action_increment(self) -> None:
        """Add one more unit of the highlighted cart line."""
        lines = self.client.cart.state.lines
        row = self._table("#cart_table").cursor_row
        if 0 <= row < len(lines):
            line = lines[row]
            await self.client.cart.dispatch(
                UpdateQuantity(line.product.id, line.quantity + 1)
            )

    async def action_remove_from_cart(self) -> None:
        """Remove the highlighted cart line."""
        lines = self.client.cart.state.lines
        row = self._table("#cart_table").cursor_row
        if 0 <= row < len(lines):
            await self.client.cart.dispatch(
                RemoveFromCart(lines[row].product.id)
            )

    async def action_clear_cart(self) -> None:
        await self.client.cart.dispatch(ClearCart())

    async def action_reload(self) -> None:
        await self.select_category(self.selected_category)

    async def action_logout(self) -> None:
        await self.client.auth.dispatch(Logout())
