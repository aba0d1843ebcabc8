"""
Client-side application state: session, cart and theme.

Each state object is handed the `LocalStore` it persists to, so several
independent sessions (or a throwaway store in tests) can coexist.
"""
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from client import ApiClient

logger = logging.getLogger(__name__)

TOKEN_KEY = "userToken"
USER_KEY = "userInfo"
CART_KEY = "cartItems"
THEME_KEY = "theme"


class LocalStore:
    """Tiny JSON-file key/value store, the client's equivalent of localStorage."""

    def __init__(self, path=None):
        self.path = Path(path or os.getenv("STOREFRONT_STORE", Path.home() / ".negromate" / "storage.json"))
        self._data = self._load()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Ignoring unreadable store %s: %s", self.path, exc)
            return {}

    def _flush(self):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._data, ensure_ascii=False), encoding="utf-8")

    def get(self, key: str, default=None):
        return self._data.get(key, default)

    def set(self, key: str, value):
        self._data[key] = value
        self._flush()

    def remove(self, key: str):
        if self._data.pop(key, None) is not None:
            self._flush()


class SessionState:
    def __init__(self, api: ApiClient, store: LocalStore):
        self.api = api
        self.store = store
        self.token: Optional[str] = store.get(TOKEN_KEY)
        self.user: Optional[dict] = store.get(USER_KEY) if self.token else None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def is_admin(self) -> bool:
        return bool(self.user) and self.user.get("role") == "admin"

    def _remember(self, response: dict) -> dict:
        data = response.get("data") or {}
        if data.get("token"):
            self.token = data["token"]
            self.user = data
            self.store.set(TOKEN_KEY, self.token)
            self.store.set(USER_KEY, self.user)
        return response

    def login(self, email: str, password: str) -> dict:
        return self._remember(self.api.auth.login(email, password))

    def register(self, username: str, email: str, password: str) -> dict:
        return self._remember(self.api.auth.register(username, email, password))

    def refresh_profile(self) -> Optional[dict]:
        if not self.token:
            return None
        profile = self.api.auth.profile(self.token)["data"]
        self.user = {**profile, "token": self.token}
        self.store.set(USER_KEY, self.user)
        return self.user

    def logout(self):
        self.token = None
        self.user = None
        self.store.remove(TOKEN_KEY)
        self.store.remove(USER_KEY)


class CartState:
    def __init__(self, store: LocalStore):
        self.store = store
        self.items: List[dict] = store.get(CART_KEY, [])

    def _save(self):
        self.store.set(CART_KEY, self.items)

    def _find(self, product_id) -> Optional[dict]:
        for item in self.items:
            if item["product"]["_id"] == product_id:
                return item
        return None

    def add(self, product: dict, quantity: int = 1):
        item = self._find(product["_id"])
        if item:
            item["quantity"] = max(1, item["quantity"] + quantity)
        else:
            self.items.append({"product": dict(product), "quantity": max(1, quantity)})
        self._save()

    def remove(self, product_id):
        self.items = [it for it in self.items if it["product"]["_id"] != product_id]
        self._save()

    def update_quantity(self, product_id, quantity: int):
        item = self._find(product_id)
        if item:
            item["quantity"] = max(1, quantity)
            self._save()

    def clear(self):
        self.items = []
        self._save()

    @property
    def count(self) -> int:
        return sum(it["quantity"] for it in self.items)

    @property
    def total(self) -> float:
        return sum(it["product"].get("price", 0) * it["quantity"] for it in self.items)

    def to_order_items(self) -> List[dict]:
        # Prices are left out: the server prices the order itself
        return [{"product": it["product"]["_id"], "quantity": it["quantity"]} for it in self.items]


class ThemeState:
    THEMES = ("light", "dark")

    def __init__(self, store: LocalStore):
        self.store = store
        theme = store.get(THEME_KEY, "light")
        self.theme = theme if theme in self.THEMES else "light"

    @property
    def css_class(self) -> str:
        return f"{self.theme}-theme"

    def toggle(self) -> str:
        self.theme = "dark" if self.theme == "light" else "light"
        self.store.set(THEME_KEY, self.theme)
        return self.theme


def checkout(session: SessionState, cart: CartState) -> dict:
    """Place an order for the cart contents and empty the cart once it is accepted."""
    if not session.is_authenticated:
        raise PermissionError("Debes iniciar sesión para finalizar la compra")
    response = session.api.orders.create(cart.to_order_items(), session.token)
    cart.clear()
    return response
