"""
Figma REST API 讀取

讀取檔案文件樹、取得組件的渲染圖 URL，並下載暫時性的圖檔。
"""

import json
from typing import Optional

import requests


class FigmaAPIError(Exception):
    """Figma API 非 2xx 或無回應."""

    def __init__(self, message: str, status_code: Optional[int] = None, body=None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body

    def hints(self) -> list:
        if self.status_code == 403:
            return ["This might be due to an invalid Figma token or insufficient permissions."]
        if self.status_code == 404:
            return [
                "The Figma file could not be found.",
                "Make sure the file ID is correct and that you have access to this file.",
            ]
        if self.no_response:
            return ["Please check your internet connection and try again."]
        return []

    @property
    def no_response(self) -> bool:
        return self.status_code is None and self.body is None

    def describe(self) -> list:
        """供 CLI 印出的多行錯誤說明."""
        if self.no_response:
            lines = [f"❌ No response received from the Figma API: {self}"]
        else:
            body = self.body if isinstance(self.body, str) else json.dumps(self.body, ensure_ascii=False)
            lines = [f"❌ {self}"]
            if self.status_code is not None:
                lines.append(f"   Status: {self.status_code}")
            lines.append(f"   Message: {body}")
        lines.extend(f"   💡 {hint}" for hint in self.hints())
        return lines


def _error_body(resp: requests.Response):
    try:
        return resp.json()
    except ValueError:
        return resp.text


class FigmaAPIClient:
    """Figma REST API 唯讀封裝."""

    BASE_URL = "https://api.figma.com/v1"

    def __init__(self, token: str):
        self.token = token
        self.session = requests.Session()
        self.session.headers.update({
            "X-Figma-Token": token,
            "Content-Type": "application/json",
        })

    def _get(self, url: str, params: Optional[dict] = None) -> dict:
        try:
            resp = self.session.get(url, params=params)
        except requests.RequestException as e:
            raise FigmaAPIError(str(e)) from e
        if not resp.ok:
            raise FigmaAPIError(
                f"Figma API returned {resp.status_code} for {url}",
                status_code=resp.status_code,
                body=_error_body(resp),
            )
        return resp.json()

    def get_file(self, file_key: str) -> dict:
        return self._get(f"{self.BASE_URL}/files/{file_key}")

    def get_images(self, file_key: str, node_ids: list, format: str = "png", scale: float = 1) -> dict:
        """回傳 {"images": {node_id: url 或 None}, ...}."""
        params = {"ids": ",".join(node_ids), "format": format, "scale": scale}
        data = self._get(f"{self.BASE_URL}/images/{file_key}", params)
        if data.get("err"):
            raise FigmaAPIError(f"Figma image render failed: {data['err']}", body=data.get("err"))
        if not isinstance(data.get("images"), dict):
            raise FigmaAPIError("No image URLs returned from Figma API", body=data)
        return data

    def download(self, url: str) -> bytes:
        # 渲染圖 URL 為暫時性 S3 連結，不帶 token
        try:
            resp = requests.get(url)
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise FigmaAPIError(f"Download failed: {e}", status_code=e.response.status_code) from e
        except requests.RequestException as e:
            raise FigmaAPIError(f"Download failed: {e}") from e
        return resp.content
