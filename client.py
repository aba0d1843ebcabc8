"""
HTTP client for the storefront API

Every call goes through `ApiClient.request`, which adds the JSON headers and
the bearer token and unwraps the {msg, data, status} envelope. Non-2xx
answers raise `ApiError` carrying the server's `msg`.

Per-call `options` (e.g. `timeout=`, `extensions=`) are forwarded to httpx
unchanged; a call that times out or loses its connection raises `ApiError`
with no status code.
"""
from typing import Any, Optional
from urllib.parse import quote, urlencode

import httpx

import config


class ApiError(Exception):
    def __init__(self, msg: str, status_code: Optional[int] = None):
        super().__init__(msg)
        self.msg = msg
        self.status_code = status_code


class ApiClient:
    def __init__(self, base_url: Optional[str] = None, http: Optional[httpx.Client] = None, timeout: float = 10.0):
        base = (base_url or config.API_URL).rstrip("/")
        if not base.endswith("/api"):
            base += "/api"
        self.base_url = base
        self._http = http or httpx.Client(timeout=timeout)

        self.auth = _Auth(self)
        self.users = _Users(self)
        self.products = _Products(self)
        self.orders = _Orders(self)
        self.content = _Content(self)

    def request(self, endpoint: str, method: str = "GET", body: Any = None, token: Optional[str] = None, **options) -> dict:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = self._http.request(method, url, json=body, headers=headers, **options)
        except httpx.TimeoutException as exc:
            raise ApiError("La petición ha excedido el tiempo de espera") from exc
        except httpx.TransportError as exc:
            raise ApiError(f"Error de conexión: {exc}") from exc
        return self._handle(response)

    @staticmethod
    def _handle(response: httpx.Response) -> dict:
        try:
            data = response.json()
        except ValueError:
            data = None
        if response.is_error:
            msg = data.get("msg") if isinstance(data, dict) and data.get("msg") else response.reason_phrase
            raise ApiError(msg, response.status_code)
        return data

    def close(self):
        self._http.close()


class _Resource:
    def __init__(self, client: ApiClient):
        self._client = client

    def _call(self, endpoint, method="GET", body=None, token=None, **options):
        return self._client.request(endpoint, method, body, token, **options)


class _Auth(_Resource):
    def register(self, username: str, email: str, password: str, **options):
        return self._call("auth/register", "POST", {"username": username, "email": email, "password": password}, **options)

    def login(self, email: str, password: str, **options):
        return self._call("auth/login", "POST", {"email": email, "password": password}, **options)

    def profile(self, token: str, **options):
        return self._call("auth/profile", token=token, **options)


class _Users(_Resource):
    def list(self, token, **options):
        return self._call("users", token=token, **options)

    def get(self, user_id, token, **options):
        return self._call(f"users/{user_id}", token=token, **options)

    def update(self, user_id, data, token, **options):
        return self._call(f"users/{user_id}", "PUT", data, token, **options)

    def delete(self, user_id, token, **options):
        return self._call(f"users/{user_id}", "DELETE", token=token, **options)


class _Products(_Resource):
    def list(self, category: Optional[str] = None, **options):
        endpoint = "products"
        if category:
            endpoint += "?" + urlencode({"category": category})
        return self._call(endpoint, **options)

    def get(self, product_id, **options):
        return self._call(f"products/{product_id}", **options)

    def get_with_gallery(self, category: str, **options):
        return self._call(f"products/category/{quote(category)}", **options)

    def create(self, data, token, **options):
        return self._call("products", "POST", data, token, **options)

    def update(self, product_id, data, token, **options):
        return self._call(f"products/{product_id}", "PUT", data, token, **options)

    def delete(self, product_id, token, **options):
        return self._call(f"products/{product_id}", "DELETE", token=token, **options)


class _Orders(_Resource):
    def list_all(self, token, **options):
        return self._call("orders", token=token, **options)

    def mine(self, token, **options):
        return self._call("orders/myorders", token=token, **options)

    def get(self, order_id, token, **options):
        return self._call(f"orders/{order_id}", token=token, **options)

    def create(self, order_items, token, **options):
        return self._call("orders", "POST", {"orderItems": order_items}, token, **options)

    def update_status(self, order_id, status, token, **options):
        return self._call(f"orders/{order_id}", "PUT", {"status": status}, token, **options)

    def delete(self, order_id, token, **options):
        return self._call(f"orders/{order_id}", "DELETE", token=token, **options)


class _Content(_Resource):
    def list(self, token, **options):
        return self._call("content", token=token, **options)

    def get(self, section_name: str, **options):
        return self._call(f"content/{quote(section_name)}", **options)

    def create(self, data, token, **options):
        return self._call("content", "POST", data, token, **options)

    def update(self, content_id, data, token, **options):
        return self._call(f"content/{content_id}", "PUT", data, token, **options)

    def delete(self, content_id, token, **options):
        return self._call(f"content/{content_id}", "DELETE", token=token, **options)
