import pytest

from gofacade.errors import GoSyntaxError
from gofacade.go_ast import (
    ChanDir,
    GoArrayType,
    GoAssignStmt,
    GoBasicLit,
    GoChanType,
    GoEllipsis,
    GoFuncDecl,
    GoGenDecl,
    GoIdent,
    GoRawExpr,
    GoRawStmt,
    GoStarExpr,
    GoStructType,
    new_comment_group,
    path_enclosing_interval,
)
from gofacade.lexer import tokenize
from gofacade.parser import parse_file
from gofacade.positions import FileSet
from gofacade.printer import format_node


class TestLexer:
    def test_semicolon_insertion(self):
        types = [tok.type for tok in tokenize("x := f()\nreturn\n")]
        assert types == [
            "ID",
            "SHDECL",
            "ID",
            "LBRACK",
            "RBRACK",
            "SEMICOLON",
            "RETURN",
            "SEMICOLON",
        ]

    def test_comments_are_skipped(self):
        types = [tok.type for tok in tokenize("a // note\nb")]
        assert types == ["ID", "SEMICOLON", "ID", "SEMICOLON"]

    def test_literals(self):
        toks = tokenize("0x1F 1.5 2i 'a' `raw`")
        assert [tok.type for tok in toks][:5] == [
            "INT",
            "FLOAT",
            "IMAG",
            "RUNE",
            "STRING",
        ]

    def test_bad_character(self):
        with pytest.raises(GoSyntaxError) as err:
            tokenize("a\n  $", "x.go")
        assert (err.value.line, err.value.column) == (2, 3)
        assert str(err.value) == 'x.go:2:3: unexpected character "$"'


class TestDeclarations:
    def test_package_and_imports(self, parse):
        go_file = parse(
            """
            package main

            import (
                "fmt"
                str "strings"
            )
            import . "math"
            """
        )
        assert go_file.name.name == "main"
        assert [spec.import_path() for spec in go_file.imports] == [
            "fmt",
            "strings",
            "math",
        ]
        assert go_file.imports[1].name.name == "str"

    def test_grouped_types(self, parse):
        go_file = parse(
            """
            package p

            type (
                A []int
                B = A
                C map[string]*A
                D chan<- int
                E <-chan int
            )
            """
        )
        decl = go_file.decls[0]
        assert isinstance(decl, GoGenDecl)
        assert decl.tok == "type"
        a, b, c, d, e = decl.specs
        assert isinstance(a.type, GoArrayType) and a.type.len is None
        assert b.assign != 0 and a.assign == 0
        assert format_node(c.type) == "map[string]*A"
        assert isinstance(d.type, GoChanType) and d.type.dir == ChanDir.SEND
        assert e.type.dir == ChanDir.RECV

    def test_array_lengths(self, parse):
        go_file = parse(
            """
            package p

            type A [4]int
            type B [N]int
            type C [N * 2]int
            """
        )
        lengths = [decl.specs[0].type.len for decl in go_file.decls]
        assert isinstance(lengths[0], GoBasicLit)
        assert lengths[0].value == "4"
        assert isinstance(lengths[1], GoIdent)
        assert isinstance(lengths[2], GoRawExpr)
        assert lengths[2].text == "N * 2"

    def test_struct_fields(self, parse):
        go_file = parse(
            """
            package p

            type T struct {
                A, B int `json:"a"`
                *Base
                io.Reader
            }
            """
        )
        struct = go_file.decls[0].specs[0].type
        assert isinstance(struct, GoStructType)
        fields = struct.fields.list
        assert [ident.name for ident in fields[0].names] == ["A", "B"]
        assert fields[0].tag.value == '`json:"a"`'
        assert fields[1].names == [] and isinstance(fields[1].type, GoStarExpr)
        assert format_node(fields[2].type) == "io.Reader"
        assert struct.fields.num_fields() == 4

    def test_signatures(self, parse):
        go_file = parse(
            """
            package p

            func F(a, b int, rest ...string) (n int, err error)

            func (t *T) M(int, string) bool {
                return true
            }
            """
        )
        func, method = go_file.decls
        params = func.type.params.list
        assert [ident.name for ident in params[0].names] == ["a", "b"]
        assert isinstance(params[1].type, GoEllipsis)
        assert func.body is None
        assert format_node(func.type) == (
            "func(a, b int, rest ...string) (n int, err error)"
        )
        assert isinstance(method, GoFuncDecl)
        assert format_node(method.recv) == "(t *T)"
        assert format_node(method.type) == "func(int, string) bool"

    def test_mixed_parameters(self, parse):
        with pytest.raises(GoSyntaxError, match="mixed named and unnamed"):
            parse("package p\n\nfunc F(a int, []string)\n")

    def test_values(self, parse):
        go_file = parse(
            """
            package p

            const (
                A = iota
                B
            )

            var x, y = f(1, 2), []int{1, 2}
            """
        )
        consts, var = go_file.decls
        assert consts.specs[1].values == []
        assert [value.text for value in var.specs[0].values] == [
            "f(1, 2)",
            "[]int{1, 2}",
        ]

    def test_body_statements(self, parse):
        go_file = parse(
            """
            package p

            func f() {
                x, y := 1, "a"
                if x > 0 {
                    z := 2
                }
                x = 3
            }
            """
        )
        body = go_file.decls[0].body
        assert isinstance(body.list[0], GoAssignStmt)
        assert [ident.name for ident in body.list[0].lhs] == ["x", "y"]
        assert [value.text for value in body.list[0].rhs] == ["1", '"a"']
        # Nested blocks are not looked into
        assert isinstance(body.list[1], GoRawStmt)
        assert isinstance(body.list[2], GoRawStmt)
        assert body.text.startswith("{") and body.text.endswith("}")


class TestComments:
    def test_doc_and_line_comments(self, parse):
        go_file = parse(
            """
            // Package p is a test.
            package p

            // T is documented.
            // On two lines.
            type T int // trailing

            // Detached.

            var V int

            type S struct {
                // F is a field.
                F int // line
            }
            """
        )
        assert go_file.doc.text() == "Package p is a test.\n"
        t_decl, v_decl, s_decl = go_file.decls
        assert t_decl.doc.text() == "T is documented.\nOn two lines.\n"
        assert t_decl.specs[0].comment.text() == "trailing\n"
        assert v_decl.doc is None
        field = s_decl.specs[0].type.fields.list[0]
        assert field.doc.text() == "F is a field.\n"
        assert field.comment.text() == "line\n"
        assert len(go_file.comments) == 6

    def test_grouped_spec_docs(self, parse):
        go_file = parse(
            """
            package p

            var (
                // X doc.
                X int // x comment
                Y = 2
            )
            """
        )
        x_spec, y_spec = go_file.decls[0].specs
        assert x_spec.doc.text() == "X doc.\n"
        assert x_spec.comment.text() == "x comment\n"
        assert y_spec.doc is None
        assert format_node(go_file.decls[0]) == (
            "var (\n\t// X doc.\n\tX int // x comment\n\tY = 2\n)"
        )

    def test_block_comment(self, parse):
        go_file = parse(
            """
            package p

            /* Block
               comment. */
            func F() {}
            """
        )
        assert go_file.decls[0].doc.text() == " Block\n   comment.\n"

    def test_synthesized_group(self):
        group = new_comment_group("first\n\nsecond")
        assert [comment.text for comment in group.list] == [
            "// first",
            "//",
            "// second",
        ]
        assert group.text() == "first\n\nsecond\n"


class TestErrors:
    def test_unexpected_token(self):
        with pytest.raises(GoSyntaxError) as err:
            parse_file(FileSet(), "bad.go", "package p\n\ntype = int\n")
        assert err.value.filename == "bad.go"
        assert err.value.line == 3
        assert 'unexpected token "="' in str(err.value)

    def test_unexpected_end(self):
        with pytest.raises(GoSyntaxError) as err:
            parse_file(FileSet(), "end.go", "package p\n\ntype T struct {\n")
        assert err.value.filename == "end.go"

    @pytest.mark.parametrize(
        "decl",
        [
            "type L[T any] struct{ v T }",
            "type Set[K comparable] map[K]bool",
            "type Num[T ~int] []T",
        ],
    )
    def test_type_parameters(self, decl):
        source = "package p\n\n" + decl + "\n"
        with pytest.raises(GoSyntaxError) as err:
            parse_file(FileSet(), "gen.go", source)
        assert err.value.line == 3
        assert err.value.column == decl.index("[") + 2
        assert "type parameters are not supported" in str(err.value)


class TestPositions:
    def test_positions_are_unique_across_files(self):
        fset = FileSet()
        first = parse_file(fset, "a.go", "package p\n\nvar A int\n")
        second = parse_file(fset, "b.go", "package p\n\nvar B int\n")
        a_ident = first.decls[0].specs[0].names[0]
        b_ident = second.decls[0].specs[0].names[0]
        assert str(fset.position(a_ident.pos)) == "a.go:3:5"
        assert str(fset.position(b_ident.pos)) == "b.go:3:5"
        assert fset.file(b_ident.pos).name == "b.go"
        assert fset.file(0) is None

    def test_path_enclosing_interval(self, parse):
        go_file = parse(
            """
            package p

            type T struct {
                F *int
            }
            """
        )
        field = go_file.decls[0].specs[0].type.fields.list[0]
        ident = field.names[0]
        path, exact = path_enclosing_interval(go_file, ident.pos, ident.end)
        assert exact
        assert path[0] is ident
        assert path[1] is field
        assert path[-1] is go_file

        star = field.type
        path, exact = path_enclosing_interval(
            go_file, star.x.pos, star.x.end
        )
        assert path[0] is star.x and path[1] is star

    def test_outside_the_file(self, parse):
        go_file = parse("package p\n")
        assert path_enclosing_interval(go_file, 10 ** 6, 10 ** 6 + 1) == (
            [],
            False,
        )
