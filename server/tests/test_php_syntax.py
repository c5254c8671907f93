import pytest

from phpcity.errors import ParseFailure
from phpcity.services.php_syntax import ClassFlag, NodeKind, PhpSyntaxAdapter


@pytest.fixture
def adapter():
    return PhpSyntaxAdapter()


def _kinds(tree):
    return [node.kind for node in tree.declarations]


def _declared(tree):
    # The opening tag and plain statements come back as OTHER.
    return [node for node in tree.declarations if node.kind != NodeKind.OTHER]


def test_namespace_and_class_are_top_level(adapter):
    code = b"""<?php
namespace App\\Models;

use Foo\\Bar;

final class User extends \\App\\Model implements Authenticatable, \\Serializable
{
    private $id;
    private $email, $password;

    public function getId() { return $this->id; }
    const LIMIT = 3;
}
"""
    tree = adapter.parse(code)

    assert NodeKind.NAMESPACE in _kinds(tree)
    namespace = next(n for n in tree.declarations if n.kind == NodeKind.NAMESPACE)
    assert namespace.name == "App\\Models"

    cls = next(n for n in tree.declarations if n.kind == NodeKind.CLASS)
    assert cls.name == "User"
    assert cls.flags & ClassFlag.FINAL
    assert not cls.flags & ClassFlag.ABSTRACT
    # Leading backslashes of fully qualified names are dropped.
    assert cls.extends.kind == NodeKind.NAME
    assert cls.extends.name == "App\\Model"
    assert [ref.name for ref in cls.implements] == ["Authenticatable", "Serializable"]

    member_kinds = [stmt.kind for stmt in cls.stmts]
    # `$email, $password` is a single declaration.
    assert member_kinds.count(NodeKind.PROPERTY) == 2
    assert member_kinds.count(NodeKind.METHOD) == 1
    assert NodeKind.OTHER in member_kinds


def test_class_line_span(adapter):
    code = b"""<?php
class A
{
    public function f()
    {
    }
}
"""
    tree = adapter.parse(code)
    cls = next(n for n in tree.declarations if n.kind == NodeKind.CLASS)
    assert cls.start_line == 2
    assert cls.end_line == 7


def test_interface_parents_are_reported_as_implements(adapter):
    code = b"""<?php
interface Repository extends Countable, IteratorAggregate
{
    public function find($id);
}
"""
    tree = adapter.parse(code)
    iface = next(n for n in tree.declarations if n.kind == NodeKind.CLASS)

    assert iface.flags & ClassFlag.INTERFACE
    assert iface.extends is None
    assert [ref.name for ref in iface.implements] == ["Countable", "IteratorAggregate"]


def test_trait_and_abstract_flags(adapter):
    code = b"""<?php
trait Greets
{
    public function hello() {}
}

abstract class Base
{
    abstract protected function run();
}
"""
    tree = adapter.parse(code)
    trait, base = [n for n in tree.declarations if n.kind == NodeKind.CLASS]

    assert trait.name == "Greets"
    assert trait.flags & ClassFlag.TRAIT
    assert base.flags & ClassFlag.ABSTRACT
    assert [stmt.kind for stmt in base.stmts] == [NodeKind.METHOD]


def test_braced_namespace_body_is_flattened(adapter):
    code = b"""<?php
namespace Shop\\Cart {
    class Item {}
}
"""
    tree = adapter.parse(code)

    namespace, item = _declared(tree)
    assert (namespace.kind, namespace.name) == (NodeKind.NAMESPACE, "Shop\\Cart")
    assert (item.kind, item.name) == (NodeKind.CLASS, "Item")


def test_enum_is_a_plain_type(adapter):
    code = b"""<?php
enum Suit
{
    case Hearts;
    case Spades;

    public function label() { return 'x'; }
}
"""
    tree = adapter.parse(code)
    (suit,) = _declared(tree)

    assert suit.kind == NodeKind.CLASS
    assert suit.name == "Suit"
    assert suit.flags == ClassFlag.NONE
    assert [stmt.kind for stmt in suit.stmts].count(NodeKind.METHOD) == 1


def test_nested_declarations_are_not_top_level(adapter):
    code = b"""<?php
function factory() {
    return new class {};
}
"""
    tree = adapter.parse(code)
    assert NodeKind.CLASS not in _kinds(tree)


def test_file_without_php_tag_has_no_declarations(adapter):
    tree = adapter.parse(b"just some text, class Foo {}\n")
    assert NodeKind.CLASS not in _kinds(tree)


def test_syntax_error_raises_parse_failure(adapter):
    with pytest.raises(ParseFailure) as excinfo:
        adapter.parse(b"<?php\nclass Broken {\n    public function (\n", filename="Broken.php")

    assert excinfo.value.filename == "Broken.php"


def test_parse_requires_bytes(adapter):
    with pytest.raises(TypeError):
        adapter.parse("<?php class A {}")


def test_parse_file(adapter, tmp_path):
    f = tmp_path / "Thing.php"
    f.write_text("<?php\nclass Thing {}\n", encoding="utf-8")

    tree = adapter.parse_file(str(f))
    assert [n.name for n in tree.declarations if n.kind == NodeKind.CLASS] == ["Thing"]
