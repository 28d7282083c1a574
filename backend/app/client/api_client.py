import logging
from typing import Dict, List, Optional

import httpx

from app.config import settings

log = logging.getLogger("inventory.client")


class InventoryClientError(Exception):
    def __init__(self, message: str, status: Optional[int] = None):
        self.status = status
        super().__init__(message)


class InventoryClient:
    """
    Thin wrapper over the items REST API. Every non-2xx response and every
    transport failure surfaces as InventoryClientError; nothing is retried.

    Pass `http` to reuse an existing httpx.Client (FastAPI's TestClient works).
    """

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None, http: Optional[httpx.Client] = None):
        self._owns_http = http is None
        self.http = http or httpx.Client(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout or settings.CLIENT_TIMEOUT_SECONDS,
        )

    def close(self):
        if self._owns_http:
            self.http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, **kwargs):
        try:
            resp = self.http.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            log.warning("%s %s failed: %s", method, path, e)
            raise InventoryClientError(f"Network error: {e}") from e
        if not resp.is_success:
            try:
                detail = resp.json().get("detail", resp.text)
            except ValueError:
                detail = resp.text
            log.warning("%s %s -> %s %s", method, path, resp.status_code, detail)
            raise InventoryClientError(str(detail), status=resp.status_code)
        return resp.json()

    def list_items(self) -> List[Dict]:
        return self._request("GET", "/items")

    def get_item(self, item_id: int) -> Dict:
        return self._request("GET", f"/items/{item_id}")

    def get_by_barcode(self, barcode: str) -> Dict:
        return self._request("GET", f"/items/barcode/{barcode}")

    def create_item(self, fields: Dict) -> Dict:
        return self._request("POST", "/items", json=fields)

    def update_item(self, item_id: int, fields: Dict) -> Dict:
        return self._request("PUT", f"/items/{item_id}", json=fields)

    def delete_item(self, item_id: int) -> Dict:
        return self._request("DELETE", f"/items/{item_id}")
