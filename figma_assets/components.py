"""
Figma 文件樹走訪與組件擷取

走訪節點樹（跳過無名或 # 開頭的節點及其子樹），
兩階段收集 COMPONENT_SET 與 COMPONENT，產出扁平的 Component 清單。
"""

from dataclasses import dataclass, field
from typing import Callable, Iterator, Optional

PATH_SEPARATOR = " / "
HIDDEN_MARKER = "#"

ICON_PREFIX = "icon/"
IMAGE_PREFIX = "img/"

PAGE_TYPES = ("CANVAS", "PAGE")


@dataclass(frozen=True)
class ComponentSetRef:
    id: str
    name: str
    path: str


@dataclass(frozen=True)
class Component:
    """從文件樹擷取的組件紀錄."""
    id: str
    name: str
    path: str
    type: str = "COMPONENT"
    description: str = ""
    width: Optional[float] = None
    height: Optional[float] = None
    component_set_id: Optional[str] = None
    component_set: Optional[ComponentSetRef] = None
    node: Optional[dict] = field(default=None, repr=False, compare=False)

    @property
    def category(self) -> Optional[str]:
        return category_of(self.name)


def category_of(name: str) -> Optional[str]:
    """'icon' / 'image'，不屬於兩者則 None."""
    if name.startswith(ICON_PREFIX):
        return "icon"
    if name.startswith(IMAGE_PREFIX):
        return "image"
    return None


@dataclass(frozen=True)
class PageSelector:
    """頁面篩選：none / by_ids / by_names；同時有 ids 與 names 時任一符合即可."""
    ids: tuple = ()
    names: tuple = ()

    @classmethod
    def none(cls) -> "PageSelector":
        return cls()

    @classmethod
    def by_ids(cls, ids) -> "PageSelector":
        return cls(ids=tuple(ids))

    @classmethod
    def by_names(cls, names) -> "PageSelector":
        return cls(names=tuple(names))

    @property
    def is_empty(self) -> bool:
        return not self.ids and not self.names

    def match_kind(self, node: dict) -> Optional[str]:
        """回傳符合方式 'id' / 'name'，不符合則 None."""
        if node.get("id") in self.ids:
            return "id"
        if node.get("name") in self.names:
            return "name"
        return None


def _is_hidden(node: dict) -> bool:
    name = node.get("name")
    return not name or name.startswith(HIDDEN_MARKER)


def traverse(node: dict, visit: Callable[[dict, list], None], path: Optional[list] = None) -> None:
    """深度優先前序走訪；visit(node, path) 的 path 含目前節點名稱."""
    for current, current_path in iter_nodes(node, path):
        visit(current, current_path)


def iter_nodes(node: dict, path: Optional[list] = None) -> Iterator[tuple]:
    """以 (node, path) 產出前序序列，跳過無名或 # 開頭的節點與其子樹."""
    # 子節點反向入堆疊，出堆疊順序即文件順序
    stack = [(node, list(path or []))]
    while stack:
        current, parent_path = stack.pop()
        if _is_hidden(current):
            continue
        current_path = parent_path + [current["name"]]
        yield current, current_path
        children = current.get("children") or []
        for child in reversed(children):
            stack.append((child, current_path))


def join_path(path: list) -> str:
    return PATH_SEPARATOR.join(path)


def find_pages(document: dict, selector: PageSelector) -> list:
    """收集符合 selector 的 CANVAS 節點，並印出位置與符合方式."""
    pages = []
    for node, path in iter_nodes(document):
        if node.get("type") not in PAGE_TYPES:
            continue
        kind = selector.match_kind(node)
        if kind:
            print(f"   📄 Matched page '{node['name']}' ({node.get('id')}) by {kind} at {join_path(path)}")
            pages.append(node)
    return pages


def _traversal_roots(document: dict, selector: Optional[PageSelector]) -> list:
    if selector is None or selector.is_empty:
        return [document]
    pages = find_pages(document, selector)
    if not pages:
        wanted = ", ".join([*selector.ids, *selector.names])
        print(f"   ⚠️  No pages matched ({wanted}); searching the whole document instead.")
        return [document]
    return pages


def extract_components(document: dict, selector: Optional[PageSelector] = None) -> list:
    """兩階段擷取：先索引 COMPONENT_SET，再收集 COMPONENT 並關聯所屬 set."""
    roots = _traversal_roots(document, selector)

    component_sets = {}
    for root in roots:
        for node, path in iter_nodes(root):
            if node.get("type") == "COMPONENT_SET":
                component_sets[node["id"]] = (node, path)

    components = []
    for root in roots:
        for node, path in iter_nodes(root):
            if node.get("type") != "COMPONENT":
                continue
            set_id = node.get("componentSetId")
            set_ref = None
            if set_id and set_id in component_sets:
                set_node, set_path = component_sets[set_id]
                set_ref = ComponentSetRef(id=set_id, name=set_node["name"], path=join_path(set_path))
            bbox = node.get("absoluteBoundingBox") or None
            components.append(Component(
                id=node["id"],
                name=node["name"],
                path=join_path(path),
                type=node["type"],
                description=node.get("description") or "",
                width=bbox.get("width") if bbox else None,
                height=bbox.get("height") if bbox else None,
                component_set_id=set_id or None,
                component_set=set_ref,
                node=node,
            ))
    return components
