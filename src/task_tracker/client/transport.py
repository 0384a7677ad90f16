from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_BASE_PATH = "/api/tasks"
DEFAULT_TIMEOUT = 10.0


# PUBLIC_INTERFACE
class TaskApi:
    """
    Thin wrapper over httpx for the /api/tasks endpoints.

    Every call returns the decoded JSON body and raises httpx.HTTPStatusError
    for non-2xx responses; connection problems surface as other httpx.HTTPError
    subclasses. No retries.

    Args:
        base_url: Server root, used when this object owns its httpx client.
        base_path: Path prefix of the task endpoints.
        timeout: Fixed request timeout in seconds for the owned client.
        client: Pre-built httpx.Client (e.g. FastAPI's TestClient) to send
            requests through instead of creating one.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        base_path: str = DEFAULT_BASE_PATH,
        timeout: float = DEFAULT_TIMEOUT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._base_path = "/" + base_path.strip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    def _url(self, task_id: Optional[str] = None) -> str:
        if task_id is None:
            return f"{self._base_path}/"
        return f"{self._base_path}/{task_id}"

    def _send(self, method: str, url: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        response = self._client.request(method, url, json=payload)
        response.raise_for_status()
        return response.json()

    def get_tasks(self) -> List[Dict[str, Any]]:
        return self._send("GET", self._url())

    def add_task(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._send("POST", self._url(), payload)

    def update_task(self, task_id: str, fields: Dict[str, Any]) -> Dict[str, Any]:
        return self._send("PUT", self._url(task_id), fields)

    def delete_task(self, task_id: str) -> Dict[str, Any]:
        return self._send("DELETE", self._url(task_id))

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "TaskApi":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
