"""
figma-asset-downloader — Figma 組件 → Android / iOS 素材

擷取 Figma 文件中的 icon/ 與 img/ 組件，轉成 VectorDrawable、多 DPI 點陣圖
或 Asset Catalog imageset。
"""

__version__ = "1.2.1"

from .components import (
    Component,
    ComponentSetRef,
    PageSelector,
    category_of,
    extract_components,
    find_pages,
    iter_nodes,
    traverse,
)
from .resolver import (
    AmbiguousComponentsError,
    NoComponentsFoundError,
    Resolution,
    ResolutionError,
    ResolutionRequest,
    SectionNotFoundError,
    find_duplicates,
    figma_link,
    resolve,
)
from .figma_reader import FigmaAPIClient, FigmaAPIError
from .config import AssetConfig, ConfigError, load_config, validate_config
from .vector_drawable import VectorConversionError, optimize_svg, svg_to_vector_drawable
from .exporter import AssetExporter, ExportReport, asset_base_name
from . import asset_catalog

__all__ = [
    "__version__",
    "Component",
    "ComponentSetRef",
    "PageSelector",
    "category_of",
    "extract_components",
    "find_pages",
    "iter_nodes",
    "traverse",
    "AmbiguousComponentsError",
    "NoComponentsFoundError",
    "Resolution",
    "ResolutionError",
    "ResolutionRequest",
    "SectionNotFoundError",
    "find_duplicates",
    "figma_link",
    "resolve",
    "FigmaAPIClient",
    "FigmaAPIError",
    "AssetConfig",
    "ConfigError",
    "load_config",
    "validate_config",
    "VectorConversionError",
    "optimize_svg",
    "svg_to_vector_drawable",
    "AssetExporter",
    "ExportReport",
    "asset_base_name",
    "asset_catalog",
]
