"""
SVG 最佳化與 Android VectorDrawable 轉換

optimize_svg 使用 scour；失敗時回傳原始內容。
svg_to_vector_drawable 支援 Figma 匯出常見的 path / rect / circle / ellipse /
line / polyline / polygon / g，以及 fill、stroke、opacity 與簡單 transform。
"""

import math
import re
import xml.etree.ElementTree as ET
from typing import Optional
from xml.sax.saxutils import quoteattr

from scour import scour

ANDROID_NS = "http://schemas.android.com/apk/res/android"

_SKIPPED_TAGS = {"defs", "clipPath", "mask", "title", "desc", "metadata", "style", "linearGradient", "radialGradient"}
_SHAPE_TAGS = {"path", "rect", "circle", "ellipse", "line", "polyline", "polygon"}

# 會向下繼承的展示屬性
_INHERITED = ("fill", "fill-opacity", "fill-rule", "stroke", "stroke-width",
              "stroke-opacity", "stroke-linecap", "stroke-linejoin", "stroke-miterlimit")

_NAMED_COLORS = {
    "black": "#000000", "white": "#FFFFFF", "red": "#FF0000", "green": "#008000",
    "blue": "#0000FF", "yellow": "#FFFF00", "gray": "#808080", "grey": "#808080",
}

_NUMBER_RE = re.compile(r"[-+]?(?:\d*\.\d+|\d+\.?)(?:[eE][-+]?\d+)?")
_TRANSFORM_RE = re.compile(r"(matrix|translate|scale|rotate)\s*\(([^)]*)\)")
_MATRIX_EPSILON = 1e-6


class VectorConversionError(Exception):
    """SVG 無法轉為 VectorDrawable."""


def optimize_svg(svg_content: str) -> str:
    """以 scour 精簡 SVG，保留 viewBox 與 id；失敗時回傳原內容."""
    try:
        options = scour.sanitizeOptions()
        options.strip_comments = True
        options.remove_metadata = True
        options.strip_ids = False
        options.shorten_ids = False
        options.enable_viewboxing = False
        return scour.scourString(svg_content, options)
    except Exception as e:
        print(f"      ⚠️  SVG optimization failed, using original: {e}")
        return svg_content


def _local(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _fmt(value: float) -> str:
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def _numbers(text: Optional[str]) -> list:
    return [float(n) for n in _NUMBER_RE.findall(text or "")]


def _length(value: Optional[str], default: float = 0.0) -> float:
    nums = _numbers(value)
    return nums[0] if nums else default


def _parse_style(elem: ET.Element) -> dict:
    attrs = {k: v for k, v in elem.attrib.items() if "}" not in k}
    for decl in (elem.get("style") or "").split(";"):
        if ":" in decl:
            key, value = decl.split(":", 1)
            attrs[key.strip()] = value.strip()
    return attrs


def _color(value: Optional[str]) -> Optional[str]:
    """轉為 #RRGGBB；none / url() / 無法解析時回傳 None."""
    if not value:
        return None
    value = value.strip()
    if value == "none" or value.startswith("url("):
        return None
    if value.lower() in _NAMED_COLORS:
        return _NAMED_COLORS[value.lower()]
    if value.startswith("#"):
        hex_part = value[1:]
        if len(hex_part) == 3:
            hex_part = "".join(ch * 2 for ch in hex_part)
        if len(hex_part) == 6 and re.fullmatch(r"[0-9a-fA-F]{6}", hex_part):
            return f"#{hex_part.upper()}"
        return None
    if value.startswith("rgb"):
        parts = _numbers(value)
        if len(parts) >= 3:
            r, g, b = (max(0, min(255, int(round(p)))) for p in parts[:3])
            return f"#{r:02X}{g:02X}{b:02X}"
    return None


def _shape_path(tag: str, attrs: dict) -> Optional[str]:
    if tag == "path":
        return attrs.get("d") or None
    if tag == "rect":
        x, y = _length(attrs.get("x")), _length(attrs.get("y"))
        w, h = _length(attrs.get("width")), _length(attrs.get("height"))
        if w <= 0 or h <= 0:
            return None
        rx = _length(attrs.get("rx"), -1)
        ry = _length(attrs.get("ry"), -1)
        if rx < 0:
            rx = max(ry, 0)
        if ry < 0:
            ry = rx
        rx, ry = min(rx, w / 2), min(ry, h / 2)
        if rx == 0 and ry == 0:
            return f"M{_fmt(x)},{_fmt(y)}h{_fmt(w)}v{_fmt(h)}h{_fmt(-w)}Z"
        return (
            f"M{_fmt(x + rx)},{_fmt(y)}h{_fmt(w - 2 * rx)}"
            f"a{_fmt(rx)},{_fmt(ry)} 0 0,1 {_fmt(rx)},{_fmt(ry)}v{_fmt(h - 2 * ry)}"
            f"a{_fmt(rx)},{_fmt(ry)} 0 0,1 {_fmt(-rx)},{_fmt(ry)}h{_fmt(-(w - 2 * rx))}"
            f"a{_fmt(rx)},{_fmt(ry)} 0 0,1 {_fmt(-rx)},{_fmt(-ry)}v{_fmt(-(h - 2 * ry))}"
            f"a{_fmt(rx)},{_fmt(ry)} 0 0,1 {_fmt(rx)},{_fmt(-ry)}Z"
        )
    if tag in ("circle", "ellipse"):
        cx, cy = _length(attrs.get("cx")), _length(attrs.get("cy"))
        if tag == "circle":
            rx = ry = _length(attrs.get("r"))
        else:
            rx, ry = _length(attrs.get("rx")), _length(attrs.get("ry"))
        if rx <= 0 or ry <= 0:
            return None
        return (
            f"M{_fmt(cx - rx)},{_fmt(cy)}"
            f"A{_fmt(rx)},{_fmt(ry)} 0 1,0 {_fmt(cx + rx)},{_fmt(cy)}"
            f"A{_fmt(rx)},{_fmt(ry)} 0 1,0 {_fmt(cx - rx)},{_fmt(cy)}Z"
        )
    if tag == "line":
        return (
            f"M{_fmt(_length(attrs.get('x1')))},{_fmt(_length(attrs.get('y1')))}"
            f"L{_fmt(_length(attrs.get('x2')))},{_fmt(_length(attrs.get('y2')))}"
        )
    if tag in ("polyline", "polygon"):
        nums = _numbers(attrs.get("points"))
        points = [f"{_fmt(nums[i])},{_fmt(nums[i + 1])}" for i in range(0, len(nums) - 1, 2)]
        if len(points) < 2:
            return None
        data = "M" + " L".join(points)
        return data + "Z" if tag == "polygon" else data
    return None


def _matrix_attrs(values: list, transform: str) -> list:
    """matrix(a b c d e f) 拆成 scale → rotation → translate；兩軸不正交即為 skew."""
    a, b, c, d, e, f = values
    if abs(a * c + b * d) > _MATRIX_EPSILON:
        raise VectorConversionError(f"Unsupported skew matrix: {transform}")
    scale_x = math.hypot(a, b)
    scale_y = math.hypot(c, d)
    if scale_x < _MATRIX_EPSILON or scale_y < _MATRIX_EPSILON:
        raise VectorConversionError(f"Degenerate matrix transform: {transform}")
    if a * d - b * c < 0:
        scale_y = -scale_y
    rotation = math.degrees(math.atan2(b, a))
    return [
        ("scaleX", round(scale_x, 6)),
        ("scaleY", round(scale_y, 6)),
        ("rotation", round(rotation, 6)),
        ("translateX", e),
        ("translateY", f),
    ]


def _group_attrs(transform: Optional[str]) -> list:
    """將 SVG transform 轉為 <group> 屬性；不支援 skew 與串接的 transform."""
    attrs = []
    if not transform:
        return attrs
    ops = _TRANSFORM_RE.findall(transform)
    if len(ops) > 1:
        raise VectorConversionError(f"Unsupported chained transform: {transform}")
    for op, args in ops:
        values = _numbers(args)
        if op == "translate" and values:
            attrs.append(("translateX", values[0]))
            attrs.append(("translateY", values[1] if len(values) > 1 else 0.0))
        elif op == "scale" and values:
            attrs.append(("scaleX", values[0]))
            attrs.append(("scaleY", values[1] if len(values) > 1 else values[0]))
        elif op == "rotate" and values:
            attrs.append(("rotation", values[0]))
            if len(values) >= 3:
                attrs.append(("pivotX", values[1]))
                attrs.append(("pivotY", values[2]))
        elif op == "matrix" and len(values) == 6:
            attrs.extend(_matrix_attrs(values, transform))
        else:
            raise VectorConversionError(f"Unsupported transform: {transform}")
    identity = {"scaleX": 1.0, "scaleY": 1.0}
    return [(k, v) for k, v in attrs if v != identity.get(k, 0.0)]


class _Converter:
    def __init__(self):
        self.lines: list = []
        self.path_count = 0

    def emit(self, depth: int, text: str) -> None:
        self.lines.append("    " * depth + text)

    def walk(self, elem: ET.Element, inherited: dict, depth: int) -> None:
        for child in elem:
            tag = _local(child.tag)
            if tag in _SKIPPED_TAGS:
                continue
            attrs = _parse_style(child)
            if attrs.get("display") == "none" or attrs.get("visibility") == "hidden":
                continue
            style = dict(inherited)
            for key in _INHERITED:
                if key in attrs:
                    style[key] = attrs[key]
            opacity = inherited.get("opacity", 1.0) * _length(attrs.get("opacity"), 1.0)
            style["opacity"] = opacity

            group_attrs = _group_attrs(attrs.get("transform"))
            inner_depth = depth
            if group_attrs:
                rendered = " ".join(f"android:{k}={quoteattr(_fmt(v))}" for k, v in group_attrs)
                self.emit(depth, f"<group {rendered}>")
                inner_depth = depth + 1

            if tag == "g" or tag == "svg":
                self.walk(child, style, inner_depth)
            elif tag in _SHAPE_TAGS:
                self.emit_path(tag, attrs, style, inner_depth)

            if group_attrs:
                self.emit(depth, "</group>")

    def emit_path(self, tag: str, attrs: dict, style: dict, depth: int) -> None:
        data = _shape_path(tag, attrs)
        if not data:
            return
        out = [("pathData", data)]
        opacity = style.get("opacity", 1.0)

        fill_value = style.get("fill", "#000000")
        fill = _color(fill_value)
        if fill and tag not in ("line", "polyline"):
            out.append(("fillColor", fill))
            alpha = _length(style.get("fill-opacity"), 1.0) * opacity
            if alpha < 1:
                out.append(("fillAlpha", _fmt(alpha)))
            if style.get("fill-rule") == "evenodd":
                out.append(("fillType", "evenOdd"))

        stroke = _color(style.get("stroke"))
        if stroke:
            out.append(("strokeColor", stroke))
            out.append(("strokeWidth", _fmt(_length(style.get("stroke-width"), 1.0))))
            alpha = _length(style.get("stroke-opacity"), 1.0) * opacity
            if alpha < 1:
                out.append(("strokeAlpha", _fmt(alpha)))
            if style.get("stroke-linecap") in ("butt", "round", "square"):
                out.append(("strokeLineCap", style["stroke-linecap"]))
            if style.get("stroke-linejoin") in ("miter", "round", "bevel"):
                out.append(("strokeLineJoin", style["stroke-linejoin"]))
            if style.get("stroke-miterlimit"):
                out.append(("strokeMiterLimit", _fmt(_length(style["stroke-miterlimit"], 4.0))))

        if len(out) == 1:
            return
        rendered = "\n".join("    " * (depth + 1) + f"android:{k}={quoteattr(v)}" for k, v in out)
        self.emit(depth, "<path")
        self.lines.append(rendered + "/>")
        self.path_count += 1


def svg_to_vector_drawable(svg_content: str) -> str:
    """將 SVG 字串轉為 Android VectorDrawable XML 字串."""
    try:
        root = ET.fromstring(svg_content.encode("utf-8"))
    except ET.ParseError as e:
        raise VectorConversionError(f"Invalid SVG: {e}") from e
    if _local(root.tag) != "svg":
        raise VectorConversionError(f"Root element is <{_local(root.tag)}>, expected <svg>")

    view_box = _numbers(root.get("viewBox"))
    width = _length(root.get("width"), view_box[2] if len(view_box) == 4 else 0)
    height = _length(root.get("height"), view_box[3] if len(view_box) == 4 else 0)
    if len(view_box) != 4:
        view_box = [0.0, 0.0, width, height]
    if width <= 0 or height <= 0 or view_box[2] <= 0 or view_box[3] <= 0:
        raise VectorConversionError("SVG has no usable width/height or viewBox")

    converter = _Converter()
    root_attrs = _parse_style(root)
    inherited = {k: root_attrs[k] for k in _INHERITED if k in root_attrs}
    inherited["opacity"] = _length(root_attrs.get("opacity"), 1.0)

    depth = 1
    if view_box[0] or view_box[1]:
        converter.emit(1, f"<group android:translateX={quoteattr(_fmt(-view_box[0]))} "
                          f"android:translateY={quoteattr(_fmt(-view_box[1]))}>")
        depth = 2
    converter.walk(root, inherited, depth)
    if depth == 2:
        converter.emit(1, "</group>")

    if converter.path_count == 0:
        raise VectorConversionError("SVG contains no drawable paths")

    header = [
        '<?xml version="1.0" encoding="utf-8"?>',
        f'<vector xmlns:android="{ANDROID_NS}"',
        f'    android:width="{_fmt(width)}dp"',
        f'    android:height="{_fmt(height)}dp"',
        f'    android:viewportWidth="{_fmt(view_box[2])}"',
        f'    android:viewportHeight="{_fmt(view_box[3])}">',
    ]
    return "\n".join(header + converter.lines + ["</vector>"]) + "\n"
