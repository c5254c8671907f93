"""
Tree-sitter based syntax tree adapter for PHP sources.

The extractor never touches tree-sitter nodes directly. This module turns a
parsed file into a small, closed set of `SyntaxNode` kinds (namespace, type
declaration, type reference, member declarations, everything else) carrying
the flags and line span of each declaration.
"""

from dataclasses import dataclass, field
from enum import Enum, IntFlag
from typing import List, Optional

import tree_sitter_php as tsphp
from tree_sitter import Language, Parser, Node

from phpcity.errors import ParseFailure

# `language_php` accepts files mixing HTML and `<?php` blocks.
PHP_LANGUAGE = Language(tsphp.language_php())


class NodeKind(str, Enum):
    NAMESPACE = "namespace"
    CLASS = "class"
    NAME = "name"
    PROPERTY = "property_declaration"
    METHOD = "method_declaration"
    OTHER = "other"


class ClassFlag(IntFlag):
    NONE = 0
    ABSTRACT = 1
    FINAL = 2
    TRAIT = 4
    INTERFACE = 8
    ANONYMOUS = 16


@dataclass
class SyntaxNode:
    kind: NodeKind
    name: Optional[str] = None
    flags: ClassFlag = ClassFlag.NONE
    start_line: int = 0
    end_line: int = 0
    extends: Optional["SyntaxNode"] = None
    implements: List["SyntaxNode"] = field(default_factory=list)
    stmts: List["SyntaxNode"] = field(default_factory=list)


@dataclass
class SyntaxTree:
    """Top-level declaration list of one file."""
    declarations: List[SyntaxNode] = field(default_factory=list)


TYPE_DECLARATIONS = {
    'class_declaration': ClassFlag.NONE,
    'interface_declaration': ClassFlag.INTERFACE,
    'trait_declaration': ClassFlag.TRAIT,
    'enum_declaration': ClassFlag.NONE,
    'anonymous_class': ClassFlag.ANONYMOUS,
}

MODIFIER_FLAGS = {
    'abstract_modifier': ClassFlag.ABSTRACT,
    'final_modifier': ClassFlag.FINAL,
}

TYPE_REFERENCES = {'name', 'qualified_name'}

MEMBER_KINDS = {
    'property_declaration': NodeKind.PROPERTY,
    'method_declaration': NodeKind.METHOD,
}


def _text(node: Optional[Node]) -> Optional[str]:
    if node is None or node.text is None:
        return None
    return node.text.decode('utf-8', errors='replace')


def _lines(node: Node) -> dict:
    return {
        "start_line": node.start_point.row + 1,
        "end_line": node.end_point.row + 1,
    }


class PhpSyntaxAdapter:
    def __init__(self):
        self.parser = Parser(PHP_LANGUAGE)

    def parse_file(self, file_path: str) -> SyntaxTree:
        with open(file_path, 'rb') as f:
            content = f.read()
        return self.parse(content, filename=file_path)

    def parse(self, content: bytes, filename: str = "<memory>") -> SyntaxTree:
        """
        Parse PHP source bytes.

        Tree-sitter always produces a tree, recovering around bad input. A
        file that needed recovery is rejected with `ParseFailure`, the same
        way php-ast refuses it, so callers can skip it.
        """
        if not isinstance(content, bytes):
            raise TypeError(f"Source must be bytes, got {type(content).__name__}")

        tree = self.parser.parse(content)
        root = tree.root_node
        if root.has_error:
            line = self._first_error_line(root)
            raise ParseFailure(filename, f"syntax error near line {line}")

        return SyntaxTree(declarations=self._convert_statements(root))

    def _first_error_line(self, node: Node) -> int:
        for child in node.children:
            if child.type == 'ERROR' or child.is_missing:
                return child.start_point.row + 1
            if child.has_error:
                return self._first_error_line(child)
        return node.start_point.row + 1

    def _convert_statements(self, parent: Node) -> List[SyntaxNode]:
        results = []
        for child in parent.named_children:
            if child.type == 'namespace_definition':
                name = _text(child.child_by_field_name('name'))
                results.append(SyntaxNode(NodeKind.NAMESPACE, name=name, **_lines(child)))
                # `namespace Foo { ... }`: its declarations still count as top level
                body = child.child_by_field_name('body')
                if body is not None:
                    results.extend(self._convert_statements(body))
            elif child.type in TYPE_DECLARATIONS:
                results.append(self._convert_type(child))
            else:
                results.append(SyntaxNode(NodeKind.OTHER, **_lines(child)))
        return results

    def _convert_type(self, node: Node) -> SyntaxNode:
        flags = TYPE_DECLARATIONS[node.type]
        extends: Optional[SyntaxNode] = None
        implements: List[SyntaxNode] = []

        for child in node.children:
            if child.type in MODIFIER_FLAGS:
                flags |= MODIFIER_FLAGS[child.type]
            elif child.type == 'base_clause':
                parents = [self._convert_reference(c) for c in child.named_children]
                if flags & ClassFlag.INTERFACE:
                    # php-ast files an interface's parents under `implements`
                    implements.extend(parents)
                elif parents:
                    extends = parents[0]
            elif child.type == 'class_interface_clause':
                implements.extend(self._convert_reference(c) for c in child.named_children)

        stmts: List[SyntaxNode] = []
        body = node.child_by_field_name('body')
        if body is not None:
            for member in body.named_children:
                kind = MEMBER_KINDS.get(member.type, NodeKind.OTHER)
                stmts.append(SyntaxNode(kind, **_lines(member)))

        return SyntaxNode(
            NodeKind.CLASS,
            name=_text(node.child_by_field_name('name')),
            flags=flags,
            extends=extends,
            implements=implements,
            stmts=stmts,
            **_lines(node),
        )

    def _convert_reference(self, node: Node) -> SyntaxNode:
        if node.type not in TYPE_REFERENCES:
            return SyntaxNode(NodeKind.OTHER, **_lines(node))
        name = _text(node)
        return SyntaxNode(NodeKind.NAME, name=name.lstrip('\\') if name else None, **_lines(node))
