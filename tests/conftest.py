"""
共用假資料：Figma 文件樹、假 Figma client、PNG fixture。
不需要真實 Figma Token。
"""
import io

import pytest
from PIL import Image

from figma_assets.config import AssetConfig, IconsConfig, ImagesConfig
from figma_assets.figma_reader import FigmaAPIError

ICON_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="24" height="24" viewBox="0 0 24 24" fill="none">'
    '<path d="M4 4h16v16H4z" fill="#333333"/>'
    "</svg>"
)


def make_png(width: int = 8, height: int = 8) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", (width, height), (255, 0, 0, 255)).save(buf, format="PNG")
    return buf.getvalue()


def node(id, name, type="FRAME", children=None, **extra):
    data = {"id": id, "name": name, "type": type}
    if children is not None:
        data["children"] = children
    data.update(extra)
    return data


def make_document():
    """兩個頁面；含 component set、隱藏節點與重名組件."""
    return node("0:0", "Document", "DOCUMENT", [
        node("1:1", "Icons", "CANVAS", [
            node("2:1", "icon/home", "COMPONENT",
                 absoluteBoundingBox={"x": 0, "y": 0, "width": 24, "height": 24}),
            node("2:2", "Toggle", "COMPONENT_SET", [
                node("2:3", "state=on", "COMPONENT", componentSetId="2:2"),
            ]),
            node("2:4", "#drafts", "FRAME", [
                node("2:5", "icon/draft", "COMPONENT"),
            ]),
        ]),
        node("1:2", "Images", "CANVAS", [
            node("3:1", "img/banner", "COMPONENT", description="hero banner"),
            node("3:2", "", "FRAME", [
                node("3:3", "img/hidden", "COMPONENT"),
            ]),
            node("3:4", "icon/home", "COMPONENT", componentSetId="9:9"),
        ]),
    ])


class FakeFigmaClient:
    """模擬 FigmaAPIClient：get_images 回傳假 URL，download 回傳 SVG / PNG."""

    def __init__(self, document=None, fail=None, missing=()):
        self.document = document
        self.fail = fail or (lambda node_id, format, scale: False)
        self.missing = set(missing)
        self.image_calls = []
        self.downloads = []

    def get_file(self, file_key):
        return {"name": "Test File", "document": self.document}

    def get_images(self, file_key, node_ids, format="png", scale=1):
        self.image_calls.append((tuple(node_ids), format, scale))
        for node_id in node_ids:
            if self.fail(node_id, format, scale):
                raise FigmaAPIError("render failed", status_code=500, body="render failed")
        return {
            "err": None,
            "images": {
                node_id: (None if node_id in self.missing else f"https://s3.example/{node_id}/{scale}.{format}")
                for node_id in node_ids
            },
        }

    def download(self, url):
        self.downloads.append(url)
        if url.endswith(".svg"):
            return ICON_SVG.encode("utf-8")
        return make_png()


@pytest.fixture
def document():
    return make_document()


@pytest.fixture
def android_config(tmp_path):
    res = str(tmp_path / "res")
    return AssetConfig(
        file_id="FILE123",
        token="token",
        platform="android",
        icons=IconsConfig(path=res, prefix="ic_"),
        images=ImagesConfig(path=res, format="webp", quality=90, prefix="img_", skip_dpi=[]),
    )


@pytest.fixture
def ios_config(tmp_path):
    catalog = str(tmp_path / "Assets.xcassets")
    return AssetConfig(
        file_id="FILE123",
        token="token",
        platform="ios",
        icons=IconsConfig(path=catalog, prefix=""),
        images=ImagesConfig(path=catalog, format="png", quality=90, prefix="", skip_dpi=[]),
    )


def count_files(root) -> int:
    return sum(1 for p in root.rglob("*") if p.is_file())
