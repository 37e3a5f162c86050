"""
文件樹走訪與組件擷取測試
"""
from conftest import make_document, node

from figma_assets.components import (
    Component,
    PageSelector,
    category_of,
    extract_components,
    find_pages,
    iter_nodes,
    traverse,
)


# ─── traverse ────────────────────────────────────────────────────────────────

class TestTraverse:
    def _visited(self, tree):
        seen = []
        traverse(tree, lambda n, path: seen.append((n["id"], " / ".join(path))))
        return seen

    def test_preorder_document_order(self):
        ids = [node_id for node_id, _ in self._visited(make_document())]
        assert ids == ["0:0", "1:1", "2:1", "2:2", "2:3", "1:2", "3:1", "3:4"]

    def test_hidden_marker_skips_subtree(self):
        ids = {node_id for node_id, _ in self._visited(make_document())}
        assert "2:4" not in ids
        assert "2:5" not in ids

    def test_empty_name_skips_subtree(self):
        ids = {node_id for node_id, _ in self._visited(make_document())}
        assert "3:2" not in ids
        assert "3:3" not in ids

    def test_missing_name_skips_node(self):
        tree = {"id": "0", "type": "FRAME", "children": [node("1", "child")]}
        assert self._visited(tree) == []

    def test_path_accumulation(self):
        tree = node("a", "A", children=[node("b", "B", children=[node("c", "C")])])
        assert self._visited(tree)[-1] == ("c", "A / B / C")

    def test_initial_path_prefix(self):
        seen = []
        traverse(node("x", "X"), lambda n, path: seen.append(path), path=["Root"])
        assert seen == [["Root", "X"]]

    def test_iter_nodes_matches_traverse(self):
        doc = make_document()
        lazy = [(n["id"], path) for n, path in iter_nodes(doc)]
        eager = []
        traverse(doc, lambda n, path: eager.append((n["id"], path)))
        assert lazy == eager

    def test_deep_tree(self):
        root = leaf = node("0", "n0")
        for i in range(1, 3000):
            child = node(str(i), f"n{i}")
            leaf["children"] = [child]
            leaf = child
        assert sum(1 for _ in iter_nodes(root)) == 3000


# ─── extract_components ──────────────────────────────────────────────────────

class TestExtractComponents:
    def test_collects_components_in_document_order(self):
        names = [c.name for c in extract_components(make_document())]
        assert names == ["icon/home", "state=on", "img/banner", "icon/home"]

    def test_stable_across_runs(self):
        doc = make_document()
        assert extract_components(doc) == extract_components(doc)

    def test_component_fields(self):
        home = extract_components(make_document())[0]
        assert home.id == "2:1"
        assert home.path == "Document / Icons / icon/home"
        assert home.type == "COMPONENT"
        assert home.description == ""
        assert (home.width, home.height) == (24, 24)

    def test_missing_bounding_box(self):
        banner = extract_components(make_document())[2]
        assert banner.width is None and banner.height is None
        assert banner.description == "hero banner"

    def test_component_set_association(self):
        variant = extract_components(make_document())[1]
        assert variant.component_set_id == "2:2"
        assert variant.component_set.name == "Toggle"
        assert variant.component_set.path == "Document / Icons / Toggle"

    def test_unknown_component_set(self):
        orphan = extract_components(make_document())[3]
        assert orphan.component_set_id == "9:9"
        assert orphan.component_set is None

    def test_hidden_components_excluded(self):
        names = {c.name for c in extract_components(make_document())}
        assert "icon/draft" not in names
        assert "img/hidden" not in names


# ─── page selection ──────────────────────────────────────────────────────────

class TestPageSelection:
    def test_by_id(self):
        comps = extract_components(make_document(), PageSelector.by_ids(["1:2"]))
        assert [c.id for c in comps] == ["3:1", "3:4"]
        assert comps[0].path == "Images / img/banner"

    def test_by_name(self):
        comps = extract_components(make_document(), PageSelector.by_names(["Icons"]))
        assert [c.id for c in comps] == ["2:1", "2:3"]

    def test_multiple_selectors(self):
        selector = PageSelector(ids=("1:1",), names=("Images",))
        comps = extract_components(make_document(), selector)
        assert len(comps) == 4

    def test_set_outside_selected_pages_not_associated(self):
        doc = make_document()
        doc["children"][1]["children"].append(node("3:5", "variant", "COMPONENT", componentSetId="2:2"))
        comps = extract_components(doc, PageSelector.by_names(["Images"]))
        assert comps[-1].component_set is None

    def test_no_match_falls_back_to_whole_document(self, capsys):
        comps = extract_components(make_document(), PageSelector.by_names(["Nope"]))
        assert len(comps) == 4
        assert "No pages matched" in capsys.readouterr().out

    def test_find_pages_logs_match_kind(self, capsys):
        pages = find_pages(make_document(), PageSelector.by_ids(["1:1"]))
        assert [p["id"] for p in pages] == ["1:1"]
        out = capsys.readouterr().out
        assert "by id" in out
        assert "Document / Icons" in out

    def test_only_canvas_nodes_match(self):
        doc = make_document()
        pages = find_pages(doc, PageSelector.by_names(["Toggle"]))
        assert pages == []

    def test_empty_selector(self):
        assert PageSelector.none().is_empty
        assert len(extract_components(make_document(), PageSelector.none())) == 4


class TestCategory:
    def test_prefixes(self):
        assert category_of("icon/home") == "icon"
        assert category_of("img/banner") == "image"
        assert category_of("button/primary") is None
        assert category_of("Icon/home") is None

    def test_component_category(self):
        assert Component(id="1", name="img/a", path="img/a").category == "image"
