from typing import List, Optional

from phpcity.config import GLOBAL_NAMESPACE, UNKNOWN_NAME
from phpcity.models import Category, TypeMetrics
from phpcity.services.php_syntax import ClassFlag, NodeKind, SyntaxNode, SyntaxTree


class StructuralExtractor:
    """
    Turns the top-level declarations of one file into `TypeMetrics` records.

    Holds no state between calls, so one instance can serve any number of
    files (and threads).
    """

    def extract(self, tree: SyntaxTree, file_path: str) -> Optional[TypeMetrics]:
        """
        One record per file. When a file declares several types the last
        declaration wins, which is what the persisted format has always held.
        """
        records = self.extract_all(tree, file_path)
        return records[-1] if records else None

    def extract_all(self, tree: SyntaxTree, file_path: str) -> List[TypeMetrics]:
        namespace = self._find_namespace(tree.declarations)
        records = []

        for node in tree.declarations:
            match node.kind:
                case NodeKind.NAMESPACE:
                    continue
                case NodeKind.CLASS:
                    records.append(self._type_metrics(node, file_path, namespace))
                case _:
                    continue

        return records

    def _find_namespace(self, declarations: List[SyntaxNode]) -> str:
        for node in declarations:
            if node.kind == NodeKind.NAMESPACE:
                return node.name or GLOBAL_NAMESPACE
        return GLOBAL_NAMESPACE

    def _type_metrics(self, node: SyntaxNode, file_path: str, namespace: str) -> TypeMetrics:
        interfaces = [ref.name for ref in node.implements if ref.kind == NodeKind.NAME and ref.name]

        return TypeMetrics(
            file=file_path,
            namespace=namespace,
            name=node.name or UNKNOWN_NAME,
            extends=self._reference_name(node.extends),
            # Only the first interface is part of the record format.
            implements=self._reference_name(node.implements[0]) if node.implements else None,
            line_span=max(0, node.end_line - node.start_line),
            attribute_count=count_kind(node.stmts, NodeKind.PROPERTY),
            method_count=count_kind(node.stmts, NodeKind.METHOD),
            is_abstract=bool(node.flags & ClassFlag.ABSTRACT),
            is_final=bool(node.flags & ClassFlag.FINAL),
            is_trait=bool(node.flags & ClassFlag.TRAIT),
            category=Category.INTERFACE if node.flags & ClassFlag.INTERFACE else Category.CLASS,
            is_anonymous=bool(node.flags & ClassFlag.ANONYMOUS),
            interfaces=interfaces,
        )

    def _reference_name(self, ref: Optional[SyntaxNode]) -> Optional[str]:
        if ref is None or ref.kind != NodeKind.NAME:
            return None
        return ref.name or None


def count_kind(stmts: List[SyntaxNode], kind: NodeKind) -> int:
    """Shallow count: nested bodies are never visited."""
    return sum(1 for stmt in stmts if stmt.kind == kind)
