"""
FigmaAPIClient 錯誤包裝測試（mock requests）
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from figma_assets.figma_reader import FigmaAPIClient, FigmaAPIError


def make_response(status=200, payload=None, text=""):
    resp = MagicMock()
    resp.status_code = status
    resp.ok = 200 <= status < 300
    if payload is None:
        resp.json.side_effect = ValueError("no json")
    else:
        resp.json.return_value = payload
    resp.text = text
    return resp


class TestFigmaAPIClient:
    def _client(self, response=None, error=None):
        client = FigmaAPIClient("token")
        client.session = MagicMock()
        if error is not None:
            client.session.get.side_effect = error
        else:
            client.session.get.return_value = response
        return client

    def test_token_header(self):
        client = FigmaAPIClient("secret")
        assert client.session.headers["X-Figma-Token"] == "secret"

    def test_get_file(self):
        client = self._client(make_response(payload={"document": {"id": "0:0"}}))
        assert client.get_file("KEY") == {"document": {"id": "0:0"}}
        url = client.session.get.call_args[0][0]
        assert url.endswith("/files/KEY")

    def test_get_images_params(self):
        client = self._client(make_response(payload={"err": None, "images": {"1:1": "https://x"}}))
        data = client.get_images("KEY", ["1:1", "1:2"], format="svg", scale=1)
        assert data["images"] == {"1:1": "https://x"}
        params = client.session.get.call_args[1]["params"]
        assert params == {"ids": "1:1,1:2", "format": "svg", "scale": 1}

    def test_403_hint(self):
        client = self._client(make_response(403, {"status": 403, "err": "Invalid token"}))
        with pytest.raises(FigmaAPIError) as exc:
            client.get_file("KEY")
        assert exc.value.status_code == 403
        text = "\n".join(exc.value.describe())
        assert "Invalid token" in text
        assert "invalid Figma token" in text

    def test_404_hint(self):
        client = self._client(make_response(404, text="Not found"))
        with pytest.raises(FigmaAPIError) as exc:
            client.get_file("KEY")
        assert exc.value.body == "Not found"
        assert any("file ID is correct" in hint for hint in exc.value.hints())

    def test_no_response(self):
        client = self._client(error=requests.ConnectionError("offline"))
        with pytest.raises(FigmaAPIError) as exc:
            client.get_file("KEY")
        assert exc.value.no_response
        assert "No response received" in exc.value.describe()[0]

    def test_render_error_field(self):
        client = self._client(make_response(payload={"err": "Render timeout", "images": {}}))
        with pytest.raises(FigmaAPIError, match="Render timeout"):
            client.get_images("KEY", ["1:1"])

    def test_download_without_token(self):
        client = FigmaAPIClient("token")
        resp = MagicMock(content=b"data")
        with patch("figma_assets.figma_reader.requests.get", return_value=resp) as mock_get:
            assert client.download("https://s3/x.png") == b"data"
        mock_get.assert_called_once_with("https://s3/x.png")
