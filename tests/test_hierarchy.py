from admx_catalog.collector import collect_sources
from admx_catalog.errors import STRUCTURAL_AMBIGUITY, UNRESOLVED_REFERENCE
from admx_catalog.hierarchy import associate_policies, link_categories, resolve_hierarchy
from admx_catalog.models import CatalogGraph, Category, Policy
from admx_catalog.namespaces import NamespaceMap

ALT = "BaseALT.Policies.System"
WIN = "Microsoft.Policies.Windows"


def build(policy_tree, report):
    return resolve_hierarchy(collect_sources(policy_tree, report), report)


def test_categories_linked(policy_tree, report):
    graph = build(policy_tree, report)
    components = graph.categories[f"{WIN}::WindowsComponents"]
    updates = graph.categories[f"{ALT}::Updates"]
    assert updates.parent_id == f"{WIN}::WindowsComponents"
    assert components.children_ids == [f"{ALT}::Updates"]


def test_dangling_parent_becomes_top_level(policy_tree, report):
    graph = build(policy_tree, report)
    orphan = graph.categories[f"{ALT}::Orphan"]
    assert orphan.parent_id is None
    assert f"{ALT}::Orphan" in graph.top_level_categories()
    assert any("alt:Missing" in i.message for i in report.of_kind(UNRESOLVED_REFERENCE))


def test_policies_associated_through_defining_file(policy_tree, report):
    graph = build(policy_tree, report)
    assert graph.policies[f"{ALT}::AutoUpdate"].category_id == f"{ALT}::Updates"
    # windows:System resolves to the other namespace, not BaseALT's System
    assert graph.policies[f"{ALT}::Windowed"].category_id == f"{WIN}::System"
    assert graph.categories[f"{WIN}::System"].policy_ids == [f"{ALT}::Windowed"]
    assert graph.categories[f"{ALT}::System"].policy_ids == [f"{ALT}::Proxy"]


def test_unresolved_policy_category(policy_tree, report):
    graph = build(policy_tree, report)
    lost = graph.policies[f"{ALT}::Lost"]
    assert lost.category_id is None
    assert any("Lost" in i.message and "Nowhere" in i.message
               for i in report.of_kind(UNRESOLVED_REFERENCE))


def test_linking_is_idempotent(policy_tree, report):
    graph = build(policy_tree, report)
    snapshot = {cid: (c.parent_id, list(c.children_ids), list(c.policy_ids))
                for cid, c in graph.categories.items()}
    resolve_hierarchy(graph, report)
    assert snapshot == {cid: (c.parent_id, c.children_ids, c.policy_ids)
                        for cid, c in graph.categories.items()}


def _category(name, parent=None):
    return Category(name=name, namespace="ns", display_name_token=None, source_file="f.admx",
                    parent_ref=parent, parent_ref_id=f"ns::{parent}" if parent else None)


def test_cycle_is_broken(report):
    graph = CatalogGraph()
    for cat in (_category("A", "C"), _category("B", "A"), _category("C", "B"), _category("D", "A")):
        graph.categories[cat.unique_id] = cat

    link_categories(graph, report)

    assert len(graph.top_level_categories()) == 1
    assert report.of_kind(STRUCTURAL_AMBIGUITY)
    # every category is still reachable from a top-level one
    reachable = set()
    stack = graph.top_level_categories()
    while stack:
        cid = stack.pop()
        reachable.add(cid)
        stack.extend(graph.categories[cid].children_ids)
    assert reachable == set(graph.categories)


def test_self_parent(report):
    graph = CatalogGraph()
    cat = _category("A", "A")
    graph.categories[cat.unique_id] = cat
    link_categories(graph, report)
    assert cat.parent_id is None
    assert cat.children_ids == []
    assert report.of_kind(STRUCTURAL_AMBIGUITY)


def test_policy_without_parent_reference_kept(report):
    graph = CatalogGraph()
    graph.namespaces["f.admx"] = NamespaceMap(target="ns")
    pol = Policy(name="P", namespace="ns", policy_class="User", source_file="f.admx")
    graph.policies[pol.unique_id] = pol
    associate_policies(graph, report)
    assert graph.policies["ns::P"].category_id is None
    assert report.of_kind(UNRESOLVED_REFERENCE)
