"""設定檔載入與基本驗證（YAML）."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from .components import PageSelector

DEFAULT_CONFIG_PATH = ".figma/asset_download.yaml"

# 已知有效的頂層欄位
_KNOWN_TOP_KEYS = {"fileId", "pageId", "pageName", "platform", "icons", "images"}

# 各區塊已知欄位（用於拼字提示）
_KNOWN_SECTION_KEYS = {
    "icons": {"path", "prefix"},
    "images": {"path", "format", "quality", "prefix", "skipDpi"},
}

_VALID_PLATFORMS = {"android", "ios"}
_VALID_FORMATS = {"webp", "png"}
_ANDROID_DPIS = {"ldpi", "mdpi", "hdpi", "xhdpi", "xxhdpi", "xxxhdpi"}

# 各平台預設值
_PLATFORM_DEFAULTS = {
    "android": {
        "path": "res",
        "icon_prefix": "ic_",
        "image_prefix": "img_",
        "format": "webp",
        "quality": 90,
    },
    "ios": {
        "path": "Assets.xcassets",
        "icon_prefix": "",
        "image_prefix": "",
        "format": "png",
        "quality": 90,
    },
}


class ConfigError(Exception):
    """設定檔缺漏或格式錯誤，需在任何網路請求前中止."""


@dataclass
class IconsConfig:
    path: str = "res"
    prefix: str = "ic_"


@dataclass
class ImagesConfig:
    path: str = "res"
    format: str = "webp"
    quality: int = 90
    prefix: str = "img_"
    skip_dpi: list = field(default_factory=list)


@dataclass
class AssetConfig:
    """一次執行所需的完整設定，啟動時建立後傳入各元件."""
    file_id: str
    token: str
    platform: str = "android"
    pages: PageSelector = field(default_factory=PageSelector.none)
    icons: IconsConfig = field(default_factory=IconsConfig)
    images: ImagesConfig = field(default_factory=ImagesConfig)

    @property
    def is_ios(self) -> bool:
        return self.platform == "ios"


def _warn(msg: str) -> None:
    print(f"   ⚠️  [config] {msg}")


def validate_config(cfg: dict) -> None:
    """對 config 做基本欄位驗證，印出警告但不拋例外。"""
    if not cfg:
        return

    for key in cfg:
        if key not in _KNOWN_TOP_KEYS:
            known = ", ".join(sorted(_KNOWN_TOP_KEYS))
            _warn(f"未知頂層欄位 '{key}'（已知欄位：{known}）")

    for section, known_keys in _KNOWN_SECTION_KEYS.items():
        section_cfg = cfg.get(section) or {}
        if not isinstance(section_cfg, dict):
            _warn(f"'{section}' 應為 mapping，目前是 {type(section_cfg).__name__}")
            continue
        for key in section_cfg:
            if key not in known_keys:
                known = ", ".join(sorted(known_keys))
                _warn(f"[{section}] 未知欄位 '{key}'（已知欄位：{known}）")


def _as_list(value: Any, key: str) -> list:
    """pageId / pageName / skipDpi 可寫成單一字串或字串陣列."""
    if value is None or value == "":
        return []
    if isinstance(value, (str, int)):
        return [str(value)]
    if isinstance(value, list):
        return [str(v) for v in value if v not in (None, "")]
    raise ConfigError(f"'{key}' 應為字串或字串陣列，目前是 {type(value).__name__}")


def build_config(cfg: dict, token: Optional[str]) -> AssetConfig:
    """由已解析的 YAML dict 套用平台預設並驗證必要欄位."""
    file_id = cfg.get("fileId")
    if not file_id:
        raise ConfigError("fileId is required in the configuration file")

    platform = cfg.get("platform")
    if platform is None:
        _warn("未設定 platform，預設為 'android'")
        platform = "android"
    platform = str(platform).lower()
    if platform not in _VALID_PLATFORMS:
        valid = ", ".join(sorted(_VALID_PLATFORMS))
        raise ConfigError(f"platform '{platform}' 不在支援值中（{valid}）")

    if not token:
        raise ConfigError("Figma token is required: set the FIGMA_TOKEN environment variable")

    defaults = _PLATFORM_DEFAULTS[platform]
    icons_cfg = cfg.get("icons") or {}
    images_cfg = cfg.get("images") or {}

    icons = IconsConfig(
        path=str(icons_cfg.get("path") or defaults["path"]),
        prefix=str(icons_cfg.get("prefix", defaults["icon_prefix"]) or ""),
    )

    image_format = str(images_cfg.get("format") or defaults["format"]).lower()
    if image_format not in _VALID_FORMATS:
        valid = ", ".join(sorted(_VALID_FORMATS))
        raise ConfigError(f"images.format '{image_format}' 不在支援值中（{valid}）")

    quality = images_cfg.get("quality")
    if quality is None:
        quality = defaults["quality"]
    if isinstance(quality, bool) or not isinstance(quality, int) or not 1 <= quality <= 100:
        raise ConfigError(f"images.quality 應為 1-100 的整數，目前是 {quality!r}")

    skip_dpi = _as_list(images_cfg.get("skipDpi"), "images.skipDpi")
    unknown = [dpi for dpi in skip_dpi if dpi not in _ANDROID_DPIS]
    if unknown:
        valid = ", ".join(sorted(_ANDROID_DPIS))
        raise ConfigError(f"images.skipDpi 含未知 DPI {unknown}（可用：{valid}）")
    if skip_dpi and platform == "ios":
        _warn("images.skipDpi 僅適用於 Android，iOS 將忽略")
        skip_dpi = []

    images = ImagesConfig(
        path=str(images_cfg.get("path") or defaults["path"]),
        format=image_format,
        quality=quality,
        prefix=str(images_cfg.get("prefix", defaults["image_prefix"]) or ""),
        skip_dpi=skip_dpi,
    )

    pages = PageSelector(
        ids=tuple(_as_list(cfg.get("pageId"), "pageId")),
        names=tuple(_as_list(cfg.get("pageName"), "pageName")),
    )

    return AssetConfig(
        file_id=str(file_id),
        token=token,
        platform=platform,
        pages=pages,
        icons=icons,
        images=images,
    )


def load_config(config_path: str = DEFAULT_CONFIG_PATH, token: Optional[str] = None) -> AssetConfig:
    """載入 YAML 設定檔並建立 AssetConfig；token 未指定時讀 FIGMA_TOKEN."""
    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found at {config_path}")
    with open(path, "r", encoding="utf-8") as f:
        try:
            cfg: Any = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"'{config_path}' 不是合法的 YAML：{e}") from e
    if not isinstance(cfg, dict):
        raise ConfigError(f"'{config_path}' 格式錯誤，應為 YAML mapping")
    validate_config(cfg)
    if token is None:
        token = os.environ.get("FIGMA_TOKEN")
    return build_config(cfg, token)
