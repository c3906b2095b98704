"""
AST XML Printer Tests
=====================

Tests for the indented XML rendering of parsed trees.
"""

from zqc.frontend.ast import NumberLiteral
from zqc.frontend.driver import parse_source
from zqc.frontend.xml_printer import XMLPrinter, print_xml


def render(source: str) -> str:
    outcome = parse_source(source)
    assert outcome.ok, outcome.diagnostics.report()
    return print_xml(outcome.unit)


def render_body(source: str) -> list:
    """Stripped lines of the rendering of a function body."""
    return [line.strip() for line in render(f"void f() {{ {source} }}").splitlines()]


class TestDeclarations:
    """Rendering of declarations and declarators."""

    def test_array_declaration(self):
        assert render("int a[10];") == (
            "<compilation-unit>\n"
            "    <declaration>\n"
            "        <decl-root>\n"
            "            <decl-specifiers>\n"
            "                <specifiers>int</specifiers>\n"
            "            </decl-specifiers>\n"
            "            <decl-declarators>\n"
            "                <decl-array>\n"
            "                    <array>\n"
            "                        <decl-identifier>a</decl-identifier>\n"
            "                    </array>\n"
            "                    <size>\n"
            "                        <expr-number>10.0</expr-number>\n"
            "                    </size>\n"
            "                </decl-array>\n"
            "            </decl-declarators>\n"
            "            <decl-initializer>\n"
            "            </decl-initializer>\n"
            "        </decl-root>\n"
            "    </declaration>\n"
            "</compilation-unit>\n"
        )

    def test_empty_array_size(self):
        lines = [line.strip() for line in render("char s[];").splitlines()]
        index = lines.index("<size>")
        assert lines[index + 1] == "</size>"

    def test_initializers(self):
        lines = [line.strip() for line in render("int a = 1, b = x;").splitlines()]
        start = lines.index("<decl-initializer>")
        assert lines[start + 1:start + 4] == [
            "<expr-number>1.0</expr-number>",
            "<expr-identifier>x</expr-identifier>",
            "</decl-initializer>",
        ]

    def test_function_definition(self):
        lines = [line.strip() for line in render("int f(char c) { return c; }").splitlines()]
        assert "<decl-func>" in lines
        assert lines[lines.index("<callee>") + 1] == "<decl-identifier>f</decl-identifier>"
        assert lines[lines.index("<parameters>") + 1] == "<decl-root>"
        body = lines.index("<body>")
        assert lines[body + 1:body + 6] == [
            "<compound-statement>",
            "<return-statement>",
            "<value>",
            "<expr-identifier>c</expr-identifier>",
            "</value>",
        ]


class TestExpressions:
    """Rendering of expression nodes."""

    def test_binary(self):
        lines = render_body("a + b;")
        start = lines.index("<expression-statement>")
        assert lines[start:start + 7] == [
            "<expression-statement>",
            "<add>",
            "<left-operand>",
            "<expr-identifier>a</expr-identifier>",
            "</left-operand>",
            "<right-operand>",
            "<expr-identifier>b</expr-identifier>",
        ]

    def test_operator_element_names(self):
        lines = render_body("a = b * c % d || !e; x += -y; z -= +w;")
        for tag in ("<assign>", "<expr-multi>", "<expr-mod>", "<logical-or>",
                    "<logical-not>", "<add-assign>", "<expr-unary-minus>",
                    "<sub-assign>", "<expr-unary-plus>"):
            assert tag in lines

    def test_comparison_element_names(self):
        lines = render_body("a == b != c < d <= e > f >= g << h >> i & j ^ k | l && m;")
        for tag in ("<equality>", "<inequality>", "<less>", "<less-equal>",
                    "<greater>", "<greater-equal>", "<l-shift>", "<r-shift>",
                    "<bit-and>", "<bit-xor>", "<bit-or>", "<logical-and>"):
            assert tag in lines

    def test_cast(self):
        lines = render_body("(double) x;")
        start = lines.index("<expr-cast>")
        assert lines[start:start + 4] == [
            "<expr-cast>",
            "<types>",
            "<type>double</type>",
            "</types>",
        ]

    def test_call_and_subscript(self):
        lines = render_body("f(a[1], 2);")
        assert "<expr-func-call>" in lines
        assert "<args>" in lines
        assert "<expr-array-sub>" in lines
        assert "<subscript>" in lines

    def test_parenthesized(self):
        assert "<expr-paren>" in render_body("(a);")

    def test_string_is_escaped(self):
        assert '<expr-string>a&lt;b&amp;"c"</expr-string>' in render_body(r'"a<b&\"c\"";')


class TestStatements:
    """Rendering of statements."""

    def test_if_else(self):
        lines = render_body("if (x) y; else z;")
        assert lines.index("<condition>") < lines.index("<if-body>") < lines.index("<else-body>")

    def test_if_without_else(self):
        assert "<else-body>" not in render_body("if (x) y;")

    def test_loop_statements(self):
        lines = render_body("while (x) { break; continue; ; return; }")
        for tag in ("<while-statement>", "<break-statement>", "<continue-statement>",
                    "<empty-statement>", "<return-statement>"):
            assert tag in lines
        assert "<value>" not in lines


class TestPrinter:
    """Tests for the printer object itself."""

    def test_reusable(self):
        printer = XMLPrinter()
        unit = parse_source("int a;").unit
        assert printer.print(unit) == printer.print(unit)

    def test_any_node(self):
        assert XMLPrinter().print(NumberLiteral(2.5)) == "<expr-number>2.5</expr-number>\n"
