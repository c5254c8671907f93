from typing import Iterable, Iterator, List, Optional

from phpcity.config import GLOBAL_NAMESPACE, NAMESPACE_SEPARATOR, ROOT_NAME
from phpcity.models import NamespaceNode, TypeMetrics


def split_namespace(namespace: Optional[str]) -> List[str]:
    """
    Split a namespace into path segments. Records without a namespace live in
    a single `Global` segment.
    """
    if not namespace:
        return [GLOBAL_NAMESPACE]
    return namespace.split(NAMESPACE_SEPARATOR)


def join_namespace(parts: Iterable[str]) -> str:
    return NAMESPACE_SEPARATOR.join(parts)


def create_root() -> NamespaceNode:
    return NamespaceNode(name=ROOT_NAME, full_path="", level=0)


def build_hierarchy(records: Iterable[TypeMetrics]) -> NamespaceNode:
    """
    Group records into a namespace tree.

    Children are kept in first-insertion order and records in input order;
    the layout grid depends on both.
    """
    root = create_root()

    for record in records:
        current_node = root
        parts = split_namespace(record.namespace)

        for index, part in enumerate(parts):
            if part not in current_node.children:
                current_node.children[part] = NamespaceNode(
                    name=part,
                    full_path=join_namespace(parts[: index + 1]),
                    level=index + 1,
                )
            current_node = current_node.children[part]

        current_node.records.append(record)

    return root


def iter_nodes(node: NamespaceNode) -> Iterator[NamespaceNode]:
    """Pre-order walk, children in insertion order."""
    yield node
    for child in node.children.values():
        yield from iter_nodes(child)


def max_depth(node: NamespaceNode) -> int:
    # The root alone already counts as one level.
    if not node.children:
        return 1
    return 1 + max(max_depth(child) for child in node.children.values())


def max_breadth(node: NamespaceNode) -> int:
    breadth = max(1, len(node.children))
    for child in node.children.values():
        breadth = max(breadth, max_breadth(child))
    return breadth
