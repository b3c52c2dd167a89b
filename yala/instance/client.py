"""Async client for saving a project archive on a ServiceNow instance.

Uses the Table API to find the application record for the project scope and
the Attachment API to replace any previous copy of the archive with a fresh
upload. All methods are async so they sit naturally inside the ``deploy``
command.

Typical usage::

    client = InstanceClient("https://dev1234.service-now.com", "admin", "secret")
    result = await client.save_project_archive("x_abcd_app", Path("../app.zip"))
    if not result.success:
        print(result.error)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import httpx
from pydantic import BaseModel, Field


class UploadResult(BaseModel):
    """Structured outcome of saving an archive on the instance."""

    success: bool = Field(default=True)
    error: str | None = Field(default=None)
    attachment_sys_id: str | None = Field(default=None)
    replaced: int = Field(default=0, description="Older copies that were deleted")


class InstanceError(Exception):
    """An instance API call failed; the message names the step."""


class InstanceClient:
    """Talks to ``/api/now/table`` and ``/api/now/attachment`` with basic auth."""

    def __init__(
        self,
        base_url: str,
        username: str,
        password: str,
        timeout: int = 30,
        upload_timeout: int = 240,
        app_table: str = "sys_app",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.auth = httpx.BasicAuth(username, password)
        self.timeout = timeout
        self.upload_timeout = upload_timeout
        self.app_table = app_table

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self, timeout: int | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            auth=self.auth,
            headers={"Accept": "application/json"},
            timeout=httpx.Timeout(timeout or self.timeout, connect=10.0),
        )

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Pull ``error.message`` out of a ServiceNow error body."""
        try:
            return response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return response.text[:500]

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        step: str,
        **kwargs: Any,
    ) -> httpx.Response:
        response = await client.request(method, url, **kwargs)
        if response.is_error:
            raise InstanceError(
                f"Error while {step} - {self._error_message(response)}. "
                f"HTTP {response.status_code}"
            )
        return response

    # ------------------------------------------------------------------
    # API steps
    # ------------------------------------------------------------------

    async def find_app_sys_id(self, client: httpx.AsyncClient, scope: str) -> str:
        response = await self._request(
            client, "GET", f"/api/now/table/{self.app_table}",
            "getting app record", params={"scope": scope},
        )
        records = response.json().get("result") or []
        sys_id = records[0].get("sys_id") if records else None
        if not sys_id:
            raise InstanceError(
                f"Error while finding project's app record, response data: {response.text[:500]}"
            )
        return sys_id

    async def delete_existing(
        self, client: httpx.AsyncClient, app_sys_id: str, file_name: str
    ) -> int:
        """Delete attachments on the app record named *file_name*."""
        response = await self._request(
            client, "GET", "/api/now/attachment",
            "getting existing attachments", params={"table_sys_id": app_sys_id},
        )
        deleted = 0
        for attachment in response.json().get("result") or []:
            if attachment.get("file_name") == file_name:
                await self._request(
                    client, "DELETE", f"/api/now/attachment/{attachment['sys_id']}",
                    "deleting attachment",
                )
                deleted += 1
        return deleted

    async def upload(self, app_sys_id: str, archive_path: Path) -> str:
        content = archive_path.read_bytes()
        async with self._client(self.upload_timeout) as client:
            response = await self._request(
                client, "POST", "/api/now/attachment/upload",
                "attaching zip file",
                data={"table_name": self.app_table, "table_sys_id": app_sys_id},
                files={"file": (archive_path.name, content, "application/zip")},
            )
        return (response.json().get("result") or {}).get("sys_id", "")

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def save_project_archive(self, scope: str, archive_path: str | Path) -> UploadResult:
        """Attach *archive_path* to the app record for *scope*.

        Older attachments with the same file name are deleted first.
        """
        archive = Path(archive_path)
        if not archive.exists():
            return UploadResult(success=False, error=f"Archive not found: {archive}")

        try:
            async with self._client() as client:
                app_sys_id = await self.find_app_sys_id(client, scope)
                replaced = await self.delete_existing(client, app_sys_id, archive.name)
            attachment_id = await self.upload(app_sys_id, archive)
        except InstanceError as exc:
            return UploadResult(success=False, error=str(exc))
        except httpx.ConnectError:
            return UploadResult(
                success=False, error=f"Cannot connect to {self.base_url}."
            )
        except httpx.TimeoutException:
            return UploadResult(
                success=False, error=f"Request to {self.base_url} timed out."
            )
        return UploadResult(success=True, attachment_sys_id=attachment_id, replaced=replaced)
