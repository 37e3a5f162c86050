"""
組件解析與重名偵測

由使用者的請求（指定名稱 / all / section）從扁平組件清單決定要匯出的組件。
偵測邏輯不輸出任何訊息；報告文字由 format_* 函式另行產生。
"""

from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote

from .components import category_of

FIGMA_WEB_URL = "https://www.figma.com"


class ResolutionError(Exception):
    """解析失敗（重名、零結果、section 不存在），整個執行需中止."""


class AmbiguousComponentsError(ResolutionError):
    def __init__(self, conflicts: dict):
        self.conflicts = conflicts
        names = ", ".join(conflicts)
        super().__init__(f"Multiple components share the requested name(s): {names}")


class NoComponentsFoundError(ResolutionError):
    def __init__(self, message: str = "No components found matching the provided names"):
        super().__init__(message)


class SectionNotFoundError(ResolutionError):
    def __init__(self, section: str):
        self.section = section
        super().__init__(f"No components found in section '{section}'")


@dataclass(frozen=True)
class ResolutionRequest:
    """三選一：names（精確比對）、all、section（path 子字串）."""
    names: tuple = ()
    all: bool = False
    section: Optional[str] = None

    @classmethod
    def for_names(cls, names) -> "ResolutionRequest":
        return cls(names=tuple(names))

    @classmethod
    def for_all(cls) -> "ResolutionRequest":
        return cls(all=True)

    @classmethod
    def for_section(cls, section: str) -> "ResolutionRequest":
        return cls(section=section)

    @property
    def is_empty(self) -> bool:
        return not self.names and not self.all and self.section is None


@dataclass
class Resolution:
    components: list
    not_found: list = field(default_factory=list)


def _unique(names) -> list:
    return list(dict.fromkeys(names))


def resolve(components: list, request: ResolutionRequest) -> Resolution:
    """依請求模式挑出要匯出的組件；重名或零結果時拋出 ResolutionError."""
    not_found = []
    if request.all:
        selected = list(components)
    elif request.section is not None:
        selected = [c for c in components if request.section in c.path]
        if not selected:
            raise SectionNotFoundError(request.section)
    else:
        # 先收集全部衝突再一次回報
        conflicts = {}
        selected = []
        for name in _unique(request.names):
            matches = [c for c in components if c.name == name]
            if len(matches) > 1:
                conflicts[name] = matches
            elif matches:
                selected.append(matches[0])
            else:
                not_found.append(name)
        if conflicts:
            raise AmbiguousComponentsError(conflicts)

    if not selected:
        raise NoComponentsFoundError()
    return Resolution(components=selected, not_found=not_found)


def find_duplicates(components: list) -> dict:
    """依名稱分組 icon/ 與 img/ 組件，只回傳出現兩次以上的名稱."""
    groups: dict[str, list] = {}
    for component in components:
        if category_of(component.name) is None:
            continue
        groups.setdefault(component.name, []).append(component)
    return {name: group for name, group in groups.items() if len(group) > 1}


def figma_link(file_id: str, node_id: str) -> str:
    """組件在 Figma 網頁版的連結."""
    return f"{FIGMA_WEB_URL}/file/{file_id}?node-id={quote(node_id, safe='')}"


def format_duplicate_report(groups: dict, file_id: str) -> list:
    lines = []
    for name, group in groups.items():
        lines.append(f"   ⚠️  '{name}' is used by {len(group)} components:")
        for component in group:
            lines.append(f"      - {component.path}")
            lines.append(f"        {figma_link(file_id, component.id)}")
    return lines
