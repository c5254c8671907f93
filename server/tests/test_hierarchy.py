from phpcity.models import TypeMetrics
from phpcity.services.hierarchy import (
    build_hierarchy,
    iter_nodes,
    join_namespace,
    max_breadth,
    max_depth,
    split_namespace,
)


def _record(name: str, namespace=None) -> TypeMetrics:
    return TypeMetrics(file=f"{name}.php", namespace=namespace, name=name)


def test_empty_input_yields_bare_root():
    root = build_hierarchy([])

    assert root.name == "Root"
    assert root.full_path == ""
    assert root.level == 0
    assert root.children == {}
    assert root.records == []


def test_records_attach_to_deepest_node_only():
    root = build_hierarchy([
        _record("User", "App\\Models"),
        _record("UserController", "App\\Controllers"),
        _record("Kernel", "App"),
    ])

    app = root.children["App"]
    assert app.level == 1
    assert app.full_path == "App"
    assert [r.name for r in app.records] == ["Kernel"]

    models = app.children["Models"]
    assert models.level == 2
    assert models.full_path == "App\\Models"
    assert [r.name for r in models.records] == ["User"]
    assert root.records == []


def test_missing_namespace_goes_to_global_bucket():
    root = build_hierarchy([_record("Helper"), _record("Other", "")])

    assert list(root.children) == ["Global"]
    glob = root.children["Global"]
    assert glob.level == 1
    assert [r.name for r in glob.records] == ["Helper", "Other"]


def test_children_keep_first_insertion_order():
    root = build_hierarchy([
        _record("A", "Zeta"),
        _record("B", "Alpha"),
        _record("C", "Zeta\\Inner"),
        _record("D", "Mid"),
        _record("E", "Alpha"),
    ])

    assert list(root.children) == ["Zeta", "Alpha", "Mid"]
    assert [r.name for r in root.children["Alpha"].records] == ["B", "E"]


def test_every_record_placed_exactly_once_preserving_group_order():
    namespaces = ["A", "A\\B", None, "C", "A\\B", "A", "C\\D\\E", None]
    records = [_record(f"T{i}", ns) for i, ns in enumerate(namespaces)]

    root = build_hierarchy(records)
    placed = [r for node in iter_nodes(root) for r in node.records]

    assert sorted(r.name for r in placed) == sorted(r.name for r in records)
    assert len(placed) == len(records)

    # Within each node the input order survives.
    for node in iter_nodes(root):
        positions = [records.index(r) for r in node.records]
        assert positions == sorted(positions)


def test_namespace_segmentation_round_trips():
    for namespace in ["Test", "App\\Models", "Vendor\\Package\\Sub\\Deep", "A\\\\B", "Global"]:
        assert join_namespace(split_namespace(namespace)) == namespace

    assert split_namespace(None) == ["Global"]
    assert split_namespace("") == ["Global"]


def test_depth_and_breadth():
    root = build_hierarchy([
        _record("A", "One"),
        _record("B", "Two\\Three\\Four"),
        _record("C", "Five"),
    ])

    # Root -> Two -> Three -> Four
    assert max_depth(root) == 4
    assert max_breadth(root) == 3
    assert max_depth(build_hierarchy([])) == 1
    assert max_breadth(build_hierarchy([])) == 1
