"""
Unit tests for traversal.py

Tests declaration extraction, kind masking and namespace qualification.
"""

import os
import tempfile
import unittest
from pathlib import Path

from extraction.errors import ParseError
from extraction.models import (
    MODE_FIND_ALL,
    MODE_FIND_CLASSES,
    MODE_FIND_INTERFACES,
    DeclarationKind,
    KindMask,
)
from extraction.parser import parse_bytes
from extraction.traversal import (
    extract_declaration_name,
    extract_declarations_from_tree,
    extract_file_declarations,
    extract_namespace_name,
)

ALL = KindMask(MODE_FIND_ALL)
CLASSES = KindMask(MODE_FIND_CLASSES)


def _extract(source: bytes, mask: KindMask = ALL, file_path: str = "test.php"):
    tree = parse_bytes(source)
    return extract_declarations_from_tree(tree, source, file_path, mask)


class TestNameExtraction(unittest.TestCase):
    """Test extracting names from individual nodes."""

    def test_namespace_name(self):
        source = b"<?php namespace App\\Http\\Controllers;"
        tree = parse_bytes(source)
        node = tree.root_node.named_children[-1]
        self.assertEqual(node.type, "namespace_definition")
        self.assertEqual(extract_namespace_name(node, source), "App\\Http\\Controllers")

    def test_global_namespace_has_no_name(self):
        source = b"<?php namespace { class A {} }"
        tree = parse_bytes(source)
        node = tree.root_node.named_children[-1]
        self.assertIsNone(extract_namespace_name(node, source))

    def test_declaration_name(self):
        source = b"<?php final class Widget {}"
        tree = parse_bytes(source)
        node = tree.root_node.named_children[-1]
        self.assertEqual(extract_declaration_name(node, source), "Widget")


class TestNamespaceQualification(unittest.TestCase):
    """Test fully-qualified name resolution."""

    def test_namespaced_class(self):
        declarations = _extract(b"<?php namespace Foo; class Bar {}", CLASSES, "A.php")
        self.assertEqual(len(declarations), 1)
        self.assertEqual(declarations[0].name, "Foo\\Bar")
        self.assertEqual(declarations[0].kind, DeclarationKind.CLASS)
        self.assertEqual(declarations[0].file, "A.php")

    def test_global_class_uses_local_name(self):
        declarations = _extract(b"<?php class Plain {}")
        self.assertEqual([d.name for d in declarations], ["Plain"])

    def test_last_namespace_seen_wins(self):
        source = b"""<?php
class Before {}
namespace First;
class Alpha {}
namespace Second\\Level;
interface Beta {}
class Gamma {}
"""
        declarations = _extract(source)
        self.assertEqual(
            [d.name for d in declarations],
            ["Before", "First\\Alpha", "Second\\Level\\Beta", "Second\\Level\\Gamma"],
        )

    def test_braced_namespaces(self):
        source = b"""<?php
namespace One { class A {} }
namespace { class G {} }
namespace Two { trait T {} }
"""
        declarations = _extract(source)
        self.assertEqual([d.name for d in declarations], ["One\\A", "G", "Two\\T"])
        self.assertEqual(declarations[2].kind, DeclarationKind.TRAIT)

    def test_line_numbers(self):
        source = b"<?php\n\nnamespace X;\n\nclass Y {}\n"
        declarations = _extract(source)
        self.assertEqual(declarations[0].line, 5)


class TestKindMask(unittest.TestCase):
    """Test that only masked kinds are extracted."""

    SOURCE = b"""<?php
namespace Kinds;
interface I {}
class C {}
enum E { case One; }
trait T {}
"""

    def test_all_kinds_in_source_order(self):
        declarations = _extract(self.SOURCE)
        self.assertEqual(
            [(d.name, d.kind) for d in declarations],
            [
                ("Kinds\\I", DeclarationKind.INTERFACE),
                ("Kinds\\C", DeclarationKind.CLASS),
                ("Kinds\\E", DeclarationKind.ENUM),
                ("Kinds\\T", DeclarationKind.TRAIT),
            ],
        )

    def test_classes_only(self):
        declarations = _extract(self.SOURCE, CLASSES)
        self.assertEqual([d.name for d in declarations], ["Kinds\\C"])

    def test_interface_file_with_classes_mask_is_empty(self):
        self.assertEqual(_extract(b"<?php namespace N; interface OnlyInterface {}", CLASSES), [])

    def test_empty_mask_extracts_nothing(self):
        self.assertEqual(_extract(self.SOURCE, KindMask(0)), [])

    def test_combined_mask(self):
        mask = KindMask(MODE_FIND_CLASSES | MODE_FIND_INTERFACES)
        self.assertEqual([d.name for d in _extract(self.SOURCE, mask)], ["Kinds\\I", "Kinds\\C"])


class TestTraversalScope(unittest.TestCase):
    """Test which statements are visited."""

    def setUp(self):
        self.fixtures_dir = Path(__file__).parent / "fixtures"

    def test_nested_and_anonymous_declarations_skipped(self):
        path = str(self.fixtures_dir / "nested_declarations.php")
        declarations = extract_file_declarations(path, ALL)
        self.assertEqual([d.name for d in declarations], ["Factory\\TopLevel"])

    def test_namespaced_fixture(self):
        path = str(self.fixtures_dir / "namespaced.php")
        declarations = extract_file_declarations(path, CLASSES)
        self.assertEqual([(d.name, d.kind) for d in declarations], [("Foo\\Bar", DeclarationKind.CLASS)])

    def test_multi_namespace_fixture(self):
        path = str(self.fixtures_dir / "multi_namespace.php")
        declarations = extract_file_declarations(path, CLASSES)
        self.assertEqual(
            [d.name for d in declarations],
            ["BeforeAnyNamespace", "First\\Alpha", "Second\\Level\\Gamma"],
        )

    def test_braced_namespaces_fixture(self):
        path = str(self.fixtures_dir / "braced_namespaces.php")
        declarations = extract_file_declarations(path, ALL)
        self.assertEqual(
            [d.name for d in declarations],
            ["Outer\\One\\Alpha", "GlobalClass", "Outer\\Two\\Beta"],
        )

    def test_global_class_fixture(self):
        path = str(self.fixtures_dir / "simple_class.php")
        self.assertEqual([d.name for d in extract_file_declarations(path, ALL)], ["Greeter"])

    def test_all_kinds_fixture(self):
        path = str(self.fixtures_dir / "all_kinds.php")
        declarations = extract_file_declarations(path, ALL)
        self.assertEqual(
            [d.short_name for d in declarations],
            ["Shape", "Polygon", "Square", "HasColor", "Suit"],
        )
        self.assertTrue(all(d.namespace == "App\\Domain" for d in declarations))
        self.assertTrue(all(d.file == path for d in declarations))


class TestExtractFile(unittest.TestCase):
    """Test file-level extraction errors."""

    def test_broken_file_raises_parse_error(self):
        path = str(Path(__file__).parent / "fixtures" / "broken_syntax.php")
        with self.assertRaises(ParseError) as ctx:
            extract_file_declarations(path, ALL)
        self.assertEqual(ctx.exception.file, path)

    def test_non_utf8_name_raises_parse_error(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "latin1.php")
            with open(path, "wb") as f:
                f.write(b"<?php class Caf\xe9 {}")
            with self.assertRaises(ParseError) as ctx:
                extract_file_declarations(path, ALL)
            self.assertEqual(ctx.exception.file, path)


if __name__ == "__main__":
    unittest.main()
