"""Unit tests for the instance API client (yala.instance.client).

Tests cover:
- UploadResult defaults
- error message extraction
- app record lookup
- deleting older copies of the archive
- upload request shape
- save_project_archive success and failure paths (HTTP error, connect, timeout)
"""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from yala.instance.client import InstanceClient, InstanceError, UploadResult

BASE_URL = "https://dev1234.service-now.com"


def _response(status_code: int = 200, json_data=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status_code = status_code
    response.is_error = status_code >= 400
    response.json.return_value = json_data if json_data is not None else {}
    response.text = text
    return response


def _mock_client(*responses) -> AsyncMock:
    mock_client = AsyncMock()
    mock_client.request = AsyncMock(side_effect=list(responses))
    mock_client.__aenter__ = AsyncMock(return_value=mock_client)
    mock_client.__aexit__ = AsyncMock(return_value=False)
    return mock_client


@pytest.fixture
def archive(tmp_path: Path) -> Path:
    path = tmp_path / "app-components.zip"
    path.write_bytes(b"PK\x03\x04zip-bytes")
    return path


@pytest.fixture
def client() -> InstanceClient:
    return InstanceClient(BASE_URL + "/", "admin", "secret")


class TestUploadResult:
    @pytest.mark.unit
    def test_defaults(self):
        result = UploadResult()
        assert result.success is True
        assert result.error is None
        assert result.attachment_sys_id is None
        assert result.replaced == 0


class TestClientSetup:
    @pytest.mark.unit
    def test_trailing_slash_stripped(self, client: InstanceClient):
        assert client.base_url == BASE_URL

    @pytest.mark.unit
    def test_error_message_from_body(self):
        response = _response(401, {"error": {"message": "User Not Authenticated"}})
        assert InstanceClient._error_message(response) == "User Not Authenticated"

    @pytest.mark.unit
    def test_error_message_from_text(self):
        response = _response(502, text="Bad gateway")
        response.json.side_effect = ValueError("not json")
        assert InstanceClient._error_message(response) == "Bad gateway"


class TestApiSteps:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_find_app_sys_id(self, client: InstanceClient):
        http = _mock_client(_response(json_data={"result": [{"sys_id": "app123"}]}))
        assert await client.find_app_sys_id(http, "x_abcd_app") == "app123"
        http.request.assert_awaited_once_with(
            "GET", "/api/now/table/sys_app", params={"scope": "x_abcd_app"}
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_find_app_sys_id_no_record(self, client: InstanceClient):
        http = _mock_client(_response(json_data={"result": []}, text='{"result": []}'))
        with pytest.raises(InstanceError, match="app record"):
            await client.find_app_sys_id(http, "x_abcd_app")

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_find_app_sys_id_http_error(self, client: InstanceClient):
        http = _mock_client(_response(401, {"error": {"message": "User Not Authenticated"}}))
        with pytest.raises(InstanceError) as exc_info:
            await client.find_app_sys_id(http, "x_abcd_app")
        assert str(exc_info.value) == (
            "Error while getting app record - User Not Authenticated. HTTP 401"
        )

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_delete_existing_only_matching_names(self, client: InstanceClient):
        listing = _response(json_data={"result": [
            {"sys_id": "a1", "file_name": "app-components.zip"},
            {"sys_id": "a2", "file_name": "other.zip"},
            {"sys_id": "a3", "file_name": "app-components.zip"},
        ]})
        http = _mock_client(listing, _response(204), _response(204))

        assert await client.delete_existing(http, "app123", "app-components.zip") == 2
        calls = [c.args for c in http.request.await_args_list]
        assert calls == [
            ("GET", "/api/now/attachment"),
            ("DELETE", "/api/now/attachment/a1"),
            ("DELETE", "/api/now/attachment/a3"),
        ]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_upload(self, client: InstanceClient, archive: Path):
        http = _mock_client(_response(201, {"result": {"sys_id": "att789"}}))
        with patch("httpx.AsyncClient", return_value=http) as client_cls:
            assert await client.upload("app123", archive) == "att789"

        assert client_cls.call_args.kwargs["timeout"].read == 240
        method, url = http.request.await_args.args
        kwargs = http.request.await_args.kwargs
        assert (method, url) == ("POST", "/api/now/attachment/upload")
        assert kwargs["data"] == {"table_name": "sys_app", "table_sys_id": "app123"}
        assert kwargs["files"] == {
            "file": ("app-components.zip", b"PK\x03\x04zip-bytes", "application/zip")
        }


class TestSaveProjectArchive:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success(self, client: InstanceClient, archive: Path):
        lookup = _mock_client(
            _response(json_data={"result": [{"sys_id": "app123"}]}),
            _response(json_data={"result": [{"sys_id": "old", "file_name": archive.name}]}),
            _response(204),
        )
        upload = _mock_client(_response(201, {"result": {"sys_id": "att789"}}))

        with patch("httpx.AsyncClient", side_effect=[lookup, upload]):
            result = await client.save_project_archive("x_abcd_app", archive)

        assert result == UploadResult(success=True, attachment_sys_id="att789", replaced=1)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_archive(self, client: InstanceClient, tmp_path: Path):
        result = await client.save_project_archive("x_abcd_app", tmp_path / "none.zip")
        assert result.success is False
        assert "Archive not found" in result.error

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_http_error(self, client: InstanceClient, archive: Path):
        lookup = _mock_client(_response(403, {"error": {"message": "ACL denied"}}))
        with patch("httpx.AsyncClient", return_value=lookup):
            result = await client.save_project_archive("x_abcd_app", archive)
        assert result.success is False
        assert result.error == "Error while getting app record - ACL denied. HTTP 403"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connect_error(self, client: InstanceClient, archive: Path):
        lookup = _mock_client()
        lookup.request = AsyncMock(side_effect=httpx.ConnectError("refused"))
        with patch("httpx.AsyncClient", return_value=lookup):
            result = await client.save_project_archive("x_abcd_app", archive)
        assert result.success is False
        assert result.error == f"Cannot connect to {BASE_URL}."

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self, client: InstanceClient, archive: Path):
        lookup = _mock_client(
            _response(json_data={"result": [{"sys_id": "app123"}]}),
            _response(json_data={"result": []}),
        )
        upload = _mock_client()
        upload.request = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        with patch("httpx.AsyncClient", side_effect=[lookup, upload]):
            result = await client.save_project_archive("x_abcd_app", archive)
        assert result.success is False
        assert result.error == f"Request to {BASE_URL} timed out."
