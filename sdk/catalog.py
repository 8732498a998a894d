# sdk/catalog.py
import requests
import httpx
from typing import Any, Dict, Optional

API_KEY_HEADER = "x-api-key"


class CatalogAPIError(Exception):
    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


def _unwrap(r) -> Dict[str, Any]:
    """Return the success envelope, or raise CatalogAPIError for an error envelope."""
    try:
        body = r.json()
    except ValueError:
        raise CatalogAPIError(r.status_code, r.text or "invalid response body")
    if not isinstance(body, dict):
        raise CatalogAPIError(r.status_code, "unexpected response body")
    if not body.get("success", False):
        err = body.get("error") or {}
        if not isinstance(err, dict):
            err = {}
        raise CatalogAPIError(err.get("statusCode", r.status_code), err.get("message", "request failed"))
    return body


class CatalogClient:
    def __init__(self, base_url: str = "http://localhost:3000", api_key: Optional[str] = None,
                 timeout: int = 10, session=None):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        # anything with the requests.Session call signatures works here
        self.session = session if session is not None else requests.Session()

    def _auth_headers(self) -> Dict[str, str]:
        return {API_KEY_HEADER: self.api_key} if self.api_key else {}

    def info(self):
        r = self.session.get(f"{self.base_url}/", timeout=self.timeout)
        return _unwrap(r)

    # Read
    def list_products(self, category: Optional[str] = None, in_stock: Optional[bool] = None,
                      page: Optional[int] = None, limit: Optional[int] = None):
        params = {}
        if category:
            params["category"] = category
        if in_stock is not None:
            params["inStock"] = "true" if in_stock else "false"
        if page is not None:
            params["page"] = str(page)
        if limit is not None:
            params["limit"] = str(limit)
        r = self.session.get(f"{self.base_url}/api/products", params=params, timeout=self.timeout)
        return _unwrap(r)

    def search_products(self, q: str):
        r = self.session.get(f"{self.base_url}/api/products/search", params={"q": q}, timeout=self.timeout)
        return _unwrap(r)

    def stats(self):
        r = self.session.get(f"{self.base_url}/api/products/stats", timeout=self.timeout)
        return _unwrap(r)["data"]

    def get_product(self, product_id: str):
        r = self.session.get(f"{self.base_url}/api/products/{product_id}", timeout=self.timeout)
        return _unwrap(r)["data"]

    # Write (requires api_key)
    def create_product(self, name: str, description: str, price: float, category: str, in_stock: bool = True):
        payload = {"name": name, "description": description, "price": price,
                   "category": category, "inStock": in_stock}
        r = self.session.post(f"{self.base_url}/api/products", json=payload,
                              headers=self._auth_headers(), timeout=self.timeout)
        return _unwrap(r)["data"]

    def update_product(self, product_id: str, name: str, description: str, price: float,
                       category: str, in_stock: bool):
        payload = {"name": name, "description": description, "price": price,
                   "category": category, "inStock": in_stock}
        r = self.session.put(f"{self.base_url}/api/products/{product_id}", json=payload,
                             headers=self._auth_headers(), timeout=self.timeout)
        return _unwrap(r)["data"]

    def delete_product(self, product_id: str):
        r = self.session.delete(f"{self.base_url}/api/products/{product_id}",
                                headers=self._auth_headers(), timeout=self.timeout)
        return _unwrap(r)["data"]

    # Async create (example)
    async def create_product_async(self, name: str, description: str, price: float, category: str,
                                   in_stock: bool = True, transport: Optional[httpx.AsyncBaseTransport] = None):
        payload = {"name": name, "description": description, "price": price,
                   "category": category, "inStock": in_stock}
        async with httpx.AsyncClient(base_url=self.base_url, timeout=self.timeout, transport=transport) as client:
            r = await client.post("/api/products", json=payload, headers=self._auth_headers())
            return _unwrap(r)["data"]
