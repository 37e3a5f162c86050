"""
素材匯出管線 — icon（SVG → VectorDrawable / imageset）與 image（多 DPI / 多 scale 點陣圖）

組件與解析度變體皆依序處理；單一組件或變體失敗只記錄並繼續，
已寫入的檔案不回滾，但該組件不列入成功清單。
"""

import io
import os
import re
import shutil
from dataclasses import dataclass, field
from typing import Optional

from PIL import Image

from .asset_catalog import IOS_SCALES, icon_set_contents, image_set_contents, variant_filename, write_contents
from .components import ICON_PREFIX, IMAGE_PREFIX
from .config import AssetConfig
from .figma_reader import FigmaAPIError
from .vector_drawable import optimize_svg, svg_to_vector_drawable

ANDROID_DPI_SCALES = {
    "ldpi": 0.75,
    "mdpi": 1,
    "hdpi": 1.5,
    "xhdpi": 2,
    "xxhdpi": 3,
    "xxxhdpi": 4,
}


class MissingImageURLError(Exception):
    """Figma 未回傳該組件的渲染 URL."""


def asset_base_name(name: str, category_prefix: str) -> str:
    """去掉 icon/ 或 img/ 前綴，空白轉底線並轉小寫."""
    if name.startswith(category_prefix):
        name = name[len(category_prefix):]
    return re.sub(r"\s+", "_", name).lower()


@dataclass
class ExportReport:
    processed: list = field(default_factory=list)
    failed: list = field(default_factory=list)
    written: list = field(default_factory=list)
    not_found: list = field(default_factory=list)

    def succeed(self, name: str, paths: list) -> None:
        self.processed.append(name)
        self.written.extend(paths)

    def fail(self, name: str, paths: Optional[list] = None) -> None:
        self.failed.append(name)
        self.written.extend(paths or [])


def _write_bytes(path: str, data: bytes) -> str:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "wb") as f:
        f.write(data)
    return path


def _write_text(path: str, text: str) -> str:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        f.write(text)
    return path


def _print_error(message: str, error: Exception) -> None:
    """API 錯誤附上狀態碼、回應內容與提示；其餘只印訊息."""
    if not isinstance(error, FigmaAPIError):
        print(f"   ❌ {message}: {error}")
        return
    print(f"   ❌ {message}:")
    for line in error.describe():
        print(f"   {line}")


def _reset_dir(path: str) -> None:
    if os.path.isdir(path):
        shutil.rmtree(path)
    os.makedirs(path, exist_ok=True)


class AssetExporter:
    """依平台將解析後的組件寫成 Android res/ 或 iOS Assets.xcassets 結構."""

    def __init__(self, client, config: AssetConfig):
        self.client = client
        self.config = config

    def export(self, components: list, not_found=()) -> ExportReport:
        report = ExportReport(not_found=list(not_found))
        icons = [c for c in components if c.category == "icon"]
        images = [c for c in components if c.category == "image"]

        if icons:
            print(f"\n🎨 Processing {len(icons)} icons...")
            self.export_icons(icons, report)
        if images:
            print(f"\n🖼️  Processing {len(images)} images...")
            self.export_images(images, report)
        return report

    # ─── icons ───────────────────────────────────────────────────────────

    def export_icons(self, icons: list, report: ExportReport) -> None:
        try:
            data = self.client.get_images(self.config.file_id, [c.id for c in icons], format="svg", scale=1)
        except Exception as e:
            _print_error("Error getting icon URLs from Figma", e)
            for component in icons:
                report.fail(component.name)
            return
        urls = data.get("images") or {}

        for i, component in enumerate(icons, 1):
            url = urls.get(component.id)
            if not url:
                print(f"   ❌ No image URL found for icon: {component.name}")
                report.fail(component.name)
                continue
            try:
                paths = self._export_icon(component, url)
            except Exception as e:
                _print_error(f"Failed to process icon: {component.name}", e)
                report.fail(component.name)
                continue
            print(f"   ✅ [{i}/{len(icons)}] Icon saved: {paths[0]}")
            report.succeed(component.name, paths)

    def _export_icon(self, component, url: str) -> list:
        icons_cfg = self.config.icons
        base = icons_cfg.prefix + asset_base_name(component.name, ICON_PREFIX)

        svg_content = self.client.download(url).decode("utf-8")
        optimized = optimize_svg(svg_content)

        if self.config.is_ios:
            set_dir = os.path.join(icons_cfg.path, f"{base}.imageset")
            _reset_dir(set_dir)
            svg_path = _write_text(os.path.join(set_dir, f"{base}.svg"), optimized)
            return [svg_path, write_contents(set_dir, icon_set_contents(f"{base}.svg"))]

        xml_content = svg_to_vector_drawable(optimized)
        return [_write_text(os.path.join(icons_cfg.path, "drawable", f"{base}.xml"), xml_content)]

    # ─── images ──────────────────────────────────────────────────────────

    def image_variants(self) -> list:
        """目前平台需要的 (variant, scale) 清單."""
        if self.config.is_ios:
            return [(variant, entry[0]) for variant, entry in IOS_SCALES.items()]
        skip = set(self.config.images.skip_dpi)
        return [(dpi, scale) for dpi, scale in ANDROID_DPI_SCALES.items() if dpi not in skip]

    def export_images(self, images: list, report: ExportReport) -> None:
        images_cfg = self.config.images
        ext = images_cfg.format
        variants = self.image_variants()

        for i, component in enumerate(images, 1):
            base = images_cfg.prefix + asset_base_name(component.name, IMAGE_PREFIX)
            set_dir = os.path.join(images_cfg.path, f"{base}.imageset")
            if self.config.is_ios:
                try:
                    _reset_dir(set_dir)
                except Exception as e:
                    _print_error(f"Error preparing {set_dir}", e)
                    report.fail(component.name)
                    continue

            paths = []
            failed_variants = []
            for variant, scale in variants:
                if self.config.is_ios:
                    target = os.path.join(set_dir, variant_filename(base, variant, ext))
                else:
                    target = os.path.join(images_cfg.path, f"drawable-{variant}", f"{base}.{ext}")
                try:
                    paths.append(self._export_image_variant(component, scale, target))
                except Exception as e:
                    _print_error(f"Error processing {component.name} for {variant}", e)
                    failed_variants.append(variant)

            if self.config.is_ios:
                try:
                    paths.append(write_contents(set_dir, image_set_contents(base, ext)))
                except Exception as e:
                    _print_error(f"Error writing Contents.json for {component.name}", e)
                    report.fail(component.name, paths)
                    continue

            if failed_variants:
                print(f"   ⚠️  [{i}/{len(images)}] {component.name}: {len(failed_variants)} of {len(variants)} variants failed")
                report.fail(component.name, paths)
            else:
                print(f"   ✅ [{i}/{len(images)}] Image saved for {len(variants)} variants: {component.name}")
                report.succeed(component.name, paths)

    def _export_image_variant(self, component, scale: float, target: str) -> str:
        data = self.client.get_images(self.config.file_id, [component.id], format="png", scale=scale)
        url = (data.get("images") or {}).get(component.id)
        if not url:
            raise MissingImageURLError(f"No image URL found for image: {component.name} at {scale}x")
        png_bytes = self.client.download(url)
        return _write_bytes(target, self._encode(png_bytes))

    def _encode(self, png_bytes: bytes) -> bytes:
        images_cfg = self.config.images
        if images_cfg.format == "png":
            return png_bytes
        with Image.open(io.BytesIO(png_bytes)) as img:
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA")
            out = io.BytesIO()
            img.save(out, format="WEBP", quality=images_cfg.quality)
        return out.getvalue()
