"""Async HTTP client for the gate endpoints."""

from typing import Any

import httpx

from duet.config import get_settings


class GateError(Exception):
    """A gate endpoint answered with a non-2xx status."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


class GateClient:
    """Talks to the gate service the way the browser screens do."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Authorization": f"Bearer {token}"} if token else {}
        self._http = httpx.AsyncClient(
            base_url=base_url or get_settings().API_URL,
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> "GateClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    @staticmethod
    def _raise_for_error(response: httpx.Response) -> None:
        if response.is_success:
            return
        try:
            message = response.json().get("error", response.text)
        except ValueError:
            message = response.text
        raise GateError(response.status_code, message)

    async def validate_password(self, password: str) -> bool:
        response = await self._http.post("/api/validate-password", json={"sharedPassword": password})
        return response.is_success

    async def validate_email(self, email: str) -> bool:
        response = await self._http.post("/api/validate-email", json={"email": email})
        return response.is_success

    async def list_recordings(self, user_id: str) -> list[dict[str, Any]]:
        response = await self._http.get(f"/api/recordings/{user_id}")
        self._raise_for_error(response)
        return response.json()

    async def set_status(self, user_id: str, is_online: bool) -> None:
        response = await self._http.post("/api/user-status", json={"userId": user_id, "isOnline": is_online})
        self._raise_for_error(response)

    async def partner_status(self, user_id: str) -> dict[str, Any]:
        """Partner's status row, or {"is_online": False} when there is none."""
        response = await self._http.get(f"/api/partner-status/{user_id}")
        self._raise_for_error(response)
        return response.json()
