"""
iOS Asset Catalog 輔助

產生 .imageset 內的 Contents.json，以及各 scale 變體的檔名。
"""

import json
import os

# iOS scale 變體：key -> (倍率, idiom, Contents.json 的 scale)
IOS_SCALES = {
    "1x": (1, "universal", "1x"),
    "2x": (2, "universal", "2x"),
    "3x": (3, "universal", "3x"),
    "ipad_1x": (2, "ipad", "1x"),
    "ipad_2x": (3, "ipad", "2x"),
}

_CATALOG_INFO = {"author": "xcode", "version": 1}


def variant_filename(base_name: str, variant: str, ext: str) -> str:
    """1x 不加後綴，其餘加 @2x/@3x；iPad 變體加 ~ipad."""
    _, idiom, scale = IOS_SCALES[variant]
    suffix = "" if scale == "1x" else f"@{scale}"
    device = "~ipad" if idiom == "ipad" else ""
    return f"{base_name}{suffix}{device}.{ext}"


def image_set_contents(base_name: str, ext: str) -> dict:
    """列出所有 scale 變體（不論個別寫入是否成功）."""
    images = []
    for variant, (_, idiom, scale) in IOS_SCALES.items():
        images.append({
            "filename": variant_filename(base_name, variant, ext),
            "idiom": idiom,
            "scale": scale,
        })
    return {"images": images, "info": dict(_CATALOG_INFO)}


def icon_set_contents(filename: str) -> dict:
    return {
        "images": [{"filename": filename, "idiom": "universal"}],
        "info": dict(_CATALOG_INFO),
        "properties": {"preserves-vector-representation": True},
    }


def write_contents(set_dir: str, contents: dict) -> str:
    """在 set_dir 寫入 Contents.json."""
    path = os.path.join(set_dir, "Contents.json")
    os.makedirs(set_dir, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(contents, f, indent=2, ensure_ascii=False)
    return path
