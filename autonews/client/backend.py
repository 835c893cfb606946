"""Backend used by the client, spoken over HTTP to the AutoNews API."""
import logging
from typing import Dict, List, Optional, Protocol, Set

import httpx

from autonews.core.errors import AuthRequiredError, StoreError, error_for_status

logger = logging.getLogger(__name__)


class Backend(Protocol):
    async def login(self, email: str, password: str) -> str: ...

    async def list_posts(self, params: dict) -> List[dict]: ...

    async def changes_version(self) -> int: ...

    async def list_favorites_for_viewer(self) -> Set[str]: ...

    async def insert_favorite(self, post_id: str) -> str: ...

    async def delete_favorite(self, post_id: str) -> None: ...

    async def count_favorites(self, post_ids: List[str]) -> Dict[str, int]: ...


class HttpBackend:
    """Favorites and listings through the REST API, authenticated with a bearer token"""

    def __init__(self, client: httpx.AsyncClient, token: Optional[str] = None):
        self.client = client
        self.token = token

    @classmethod
    def connect(cls, base_url: str, token: Optional[str] = None, **kwargs) -> "HttpBackend":
        return cls(httpx.AsyncClient(base_url=base_url, **kwargs), token)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def login(self, email: str, password: str) -> str:
        response = await self._request("POST", "/api/users/login", json={"email": email, "password": password})
        self.token = response.json()["access_token"]
        return self.token

    def logout(self) -> None:
        self.token = None

    async def _request(self, method: str, url: str, auth: bool = False, **kwargs) -> httpx.Response:
        headers = kwargs.pop("headers", {})
        if auth:
            if not self.token:
                raise AuthRequiredError()
            headers["Authorization"] = f"Bearer {self.token}"
        try:
            response = await self.client.request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, url, e)
            raise StoreError(f"Backend unreachable: {e}") from e
        if response.status_code >= 400:
            code = None
            try:
                body = response.json()
                detail = body.get("detail", "")
                code = body.get("error")
            except ValueError:
                detail = response.text
            raise error_for_status(response.status_code, str(detail), code)
        return response

    async def list_posts(self, params: dict) -> List[dict]:
        query = {k: v for k, v in params.items() if v is not None}
        response = await self._request("GET", "/api/posts", params=query)
        return response.json()

    async def changes_version(self) -> int:
        response = await self._request("GET", "/api/posts/changes")
        return response.json()["version"]

    async def list_favorites_for_viewer(self) -> Set[str]:
        response = await self._request("GET", "/api/favorites", auth=True)
        return set(response.json()["post_ids"])

    async def insert_favorite(self, post_id: str) -> str:
        response = await self._request("PUT", f"/api/favorites/{post_id}", auth=True)
        return response.json()["result"]

    async def delete_favorite(self, post_id: str) -> None:
        await self._request("DELETE", f"/api/favorites/{post_id}", auth=True)

    async def count_favorites(self, post_ids: List[str]) -> Dict[str, int]:
        response = await self._request("POST", "/api/favorites/counts", json={"post_ids": post_ids})
        return response.json()
