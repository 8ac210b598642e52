import pytest

from gofacade.errors import MethodError
from gofacade.go_ast import (
    ChanDir,
    GoEllipsis,
    GoField,
    GoFieldList,
    GoFuncType,
    GoIdent,
    GoStarExpr,
)
from gofacade.kinds import DeclKind, TypeKind
from gofacade.printer import format_node
from gofacade.type_node import (
    AliasType,
    BasicType,
    ChanType,
    FieldInfo,
    FuncNode,
    InterfaceType,
    ListType,
    MapType,
    StructType,
    Variant,
)


def type_node(pkg, name):
    (facade,) = pkg.lookup(DeclKind.TYPE, name=name)
    node, found = facade.type_node()
    assert found
    return node


def method_node(name, recv_type, pointer=False):
    """Make a method without parameters on the type named recv_type."""
    recv = GoIdent(recv_type)
    if pointer:
        recv = GoStarExpr(0, recv)
    return FuncNode(
        GoIdent(name),
        GoFuncType(0, GoFieldList(0, [], 0)),
        recv=GoFieldList(0, [GoField([GoIdent("x")], recv)], 0),
    )


class TestVariants:
    def test_variant_per_declaration(self, embedding):
        expected = {
            "Base": (StructType, Variant.STRUCT, TypeKind.STRUCT),
            "Arr": (ListType, Variant.LIST, TypeKind.ARRAY),
            "Sl": (ListType, Variant.LIST, TypeKind.SLICE),
            "Table": (MapType, Variant.MAP, TypeKind.MAP),
            "Recv": (ChanType, Variant.CHAN, TypeKind.CHAN),
            "Handler": (AliasType, Variant.ALIAS, TypeKind.FUNC),
            "Count": (BasicType, Variant.BASIC, TypeKind.INT),
            "Other": (AliasType, Variant.ALIAS, TypeKind.SUSPENSE),
        }
        for name, (cls, variant, kind) in expected.items():
            node = type_node(embedding, name)
            assert type(node) is cls, name
            assert node.variant == variant, name
            assert node.type_kind() == kind, name

    def test_interface_variant(self, shapes):
        node = type_node(shapes, "Shape")
        assert isinstance(node, InterfaceType)
        assert node.variant == Variant.INTERFACE

    def test_alias_declaration(self, embedding):
        assert type_node(embedding, "Other").is_assign()
        assert not type_node(embedding, "Base").is_assign()

    def test_channel_direction(self, embedding):
        assert type_node(embedding, "Recv").dir() == ChanDir.RECV

    def test_list_length(self, embedding):
        assert type_node(embedding, "Arr").length() == (3, True)
        # Lengths given by constants come from the checker
        assert type_node(embedding, "ArrN").length() == (4, True)
        assert type_node(embedding, "Sl").length() == (-1, False)

    def test_doc(self, shapes):
        assert type_node(shapes, "Rect").doc() == "Rect is a rectangle.\n"
        assert type_node(shapes, "Circle").doc() == ""

    def test_type_node_is_cached(self, shapes):
        (facade,) = shapes.lookup(DeclKind.TYPE, name="Rect")
        assert facade.type_node()[0] is facade.type_node()[0]

    def test_only_types_have_type_nodes(self, shapes):
        (facade,) = shapes.lookup(DeclKind.FUNCTION, name="NewRect")
        assert facade.type_node() == (None, False)
        assert facade.num_method() == 0


class TestMethods:
    def test_methods_are_collected(self, shapes):
        rect = type_node(shapes, "Rect")
        assert rect.num_method() == 2
        assert [rect.method(i)[0].name() for i in range(2)] == [
            "Area",
            "Perimeter",
        ]
        assert rect.method(2) == (None, False)
        assert rect.method(-1) == (None, False)
        assert type_node(shapes, "Circle").num_method() == 1

    def test_method_by_name(self, shapes):
        rect = type_node(shapes, "Rect")
        method, found = rect.method_by_name("Perimeter")
        assert found
        assert method.recv() == (FieldInfo("r", "Rect"), True)
        assert rect.method_by_name("Volume") == (None, False)

    def test_add_method(self, shapes):
        rect = type_node(shapes, "Rect")
        rect.add_method(method_node("Scale", "Rect", pointer=True))
        assert rect.num_method() == 3
        assert rect.method_by_name("Scale")[1]

    def test_add_function_fails(self, shapes):
        rect = type_node(shapes, "Rect")
        (free,) = shapes.lookup(DeclKind.FUNCTION, name="NewRect")
        func, found = free.func_node()
        assert found
        with pytest.raises(MethodError, match="not method: NewRect"):
            rect.add_method(func)
        assert rect.num_method() == 2

    def test_add_foreign_method_fails(self, shapes):
        rect = type_node(shapes, "Rect")
        circle_area, _ = type_node(shapes, "Circle").method_by_name("Area")
        with pytest.raises(MethodError) as err:
            rect.add_method(circle_area)
        assert str(err.value) == (
            "receiver does not match method: Area, want: Rect, got: Circle"
        )
        assert rect.num_method() == 2

    def test_interface_methods(self, shapes):
        shape = type_node(shapes, "Shape")
        assert shape.num_method() == 2
        area, _ = shape.method(0)
        assert area.recv() == (FieldInfo("", "Shape"), True)
        assert area.doc() == "Area returns the area.\n"
        assert area.result(0) == (FieldInfo("", "float64"), True)

    def test_implements(self, shapes):
        shape = type_node(shapes, "Shape")
        assert type_node(shapes, "Rect").implements(shape)
        assert not type_node(shapes, "Circle").implements(shape)
        # The interface has every method of Circle
        assert shape.implements(type_node(shapes, "Circle"))

    def test_implements_checks_signatures(self, load_go):
        pkg = load_go(
            "p",
            """
            package p

            type Writer interface {
                Write(data []byte) (int, error)
            }

            type Good struct{}

            func (g Good) Write(b []byte) (n int, err error) {
                return 0, nil
            }

            type BadResult struct{}

            func (b BadResult) Write(data []byte) int {
                return 0
            }

            type BadParam struct{}

            func (b BadParam) Write(data string) (int, error) {
                return 0, nil
            }

            type Variadic struct{}

            func (v Variadic) Write(data ...byte) (int, error) {
                return 0, nil
            }
            """,
        ).created[0]
        writer = type_node(pkg, "Writer")
        assert type_node(pkg, "Good").implements(writer)
        assert not type_node(pkg, "BadResult").implements(writer)
        assert not type_node(pkg, "BadParam").implements(writer)
        assert not type_node(pkg, "Variadic").implements(writer)

    def test_embedded_interface_methods(self, load_go):
        pkg = load_go(
            "p",
            """
            package p

            type Reader interface {
                Read(data []byte) (int, error)
            }

            type ReadWriter interface {
                Reader
                Write(data []byte) (int, error)
            }

            type WriteOnly struct{}

            func (w WriteOnly) Write(data []byte) (int, error) {
                return 0, nil
            }

            type File struct{}

            func (f File) Read(data []byte) (int, error) {
                return 0, nil
            }

            func (f File) Write(data []byte) (int, error) {
                return 0, nil
            }
            """,
        ).created[0]
        rw = type_node(pkg, "ReadWriter")
        assert [rw.method(i)[0].name() for i in range(2)] == ["Write", "Read"]
        read, _ = rw.method_by_name("Read")
        assert read.recv() == (FieldInfo("", "ReadWriter"), True)
        assert not type_node(pkg, "WriteOnly").implements(rw)
        assert type_node(pkg, "File").implements(rw)

    def test_mutually_embedding_interfaces(self, load_go):
        pkg = load_go(
            "p",
            """
            package p

            type A interface {
                B
                M()
            }

            type B interface {
                A
            }
            """,
        ).created[0]
        # B first, before A has a type node
        b = type_node(pkg, "B")
        assert [b.method(0)[0].name(), b.num_method()] == ["M", 1]
        assert b.method(0)[0].recv() == (FieldInfo("", "B"), True)
        assert type_node(pkg, "A").num_method() == 1

    def test_facade_implements(self, shapes):
        (rect,) = shapes.lookup(DeclKind.TYPE, name="Rect")
        (shape,) = shapes.lookup(DeclKind.TYPE, name="Shape")
        (new_rect,) = shapes.lookup(DeclKind.FUNCTION, name="NewRect")
        assert rect.implements(shape)
        assert rect.implements(type_node(shapes, "Shape"))
        assert not rect.implements(new_rect)
        assert rect.num_method() == 2
        assert rect.method_by_name("Area")[1]

    def test_rename(self, shapes):
        rect = type_node(shapes, "Rect")
        rect.set_name("Box")
        assert rect.name() == "Box"
        perimeter, _ = rect.method_by_name("Perimeter")
        assert perimeter.recv() == (FieldInfo("r", "Box"), True)
        (facade,) = shapes.lookup(DeclKind.TYPE, name="Box")
        assert facade.preview().startswith("// Rect is a rectangle.\ntype Box")


class TestFuncNode:
    def test_params_and_results(self, shapes):
        (facade,) = shapes.lookup(DeclKind.FUNCTION, name="NewRect")
        func, _ = facade.func_node()
        assert func.num_param() == 2
        assert func.param(0) == (FieldInfo("w", "float64"), True)
        assert func.param(1) == (FieldInfo("h", "float64"), True)
        assert func.param(2) == (None, False)
        assert func.num_result() == 1
        assert func.result(0) == (FieldInfo("", "*Rect"), True)
        assert func.recv() == (None, False)
        assert not func.is_variadic()

    def test_variadic(self):
        variadic = GoEllipsis(0, GoIdent("int"))
        func = FuncNode(
            GoIdent("F"),
            GoFuncType(
                0,
                GoFieldList(0, [GoField([GoIdent("args")], variadic)], 0),
            ),
        )
        assert func.is_variadic()
        assert func.param(0) == (FieldInfo("args", "...int"), True)

    def test_interface_method_facade_shares_node(self, shapes):
        facades = shapes.lookup(DeclKind.FUNCTION, name="Area")
        assert len(facades) == 3
        shape = type_node(shapes, "Shape")
        iface_area, _ = shape.method_by_name("Area")
        nodes = [facade.func_node()[0] for facade in facades]
        assert iface_area in nodes

    def test_method_facade_shares_node(self, shapes):
        rect = type_node(shapes, "Rect")
        rect_area, _ = rect.method_by_name("Area")
        facades = shapes.lookup(DeclKind.FUNCTION, name="Area")
        assert rect_area in [facade.func_node()[0] for facade in facades]
        assert rect_area.doc() == "Area of the rectangle.\n"


class TestStructType:
    def test_fields_are_expanded(self, embedding):
        outer = type_node(embedding, "Outer")
        names = [outer.field(i)[0].name() for i in range(outer.num_field())]
        assert names == ["Base", "Name", "Bad", "A", "B", "Plain"]
        a_field, _ = outer.field_by_name("A")
        b_field, _ = outer.field_by_name("B")
        assert a_field.type_name() == b_field.type_name() == "int"
        # Each field owns its tag
        a_field.tags.set("db", "y")
        assert str(b_field.tags) == 'db:"x"'
        assert str(a_field.tags) == 'db:"y"'

    def test_expanded_fields_render(self, embedding):
        outer = type_node(embedding, "Outer")
        text = format_node(outer.expr())
        assert "\tA int `db:\"x\"`\n\tB int `db:\"x\"`" in text

    def test_anonymous_fields(self, embedding):
        base, _ = type_node(embedding, "Outer").field(0)
        assert base.anonymous()
        assert base.name() == "Base"
        assert base.doc() == "Embedded by value.\n"
        ptr, _ = type_node(embedding, "PtrOuter").field(0)
        assert ptr.anonymous()
        assert ptr.name() == "Base"
        assert ptr.type_name() == "*Base"
        name, _ = type_node(embedding, "Outer").field(1)
        assert not name.anonymous()

    def test_promoted_fields(self, embedding):
        outer = type_node(embedding, "Outer")
        field, found = outer.field_by_name("ID")
        assert found
        assert field is type_node(embedding, "Base").field(0)[0]
        assert type_node(embedding, "PtrOuter").field_by_name("ID")[1]
        assert outer.field_by_name("Missing") == (None, False)
        assert outer.field(10) == (None, False)

    def test_field_comments(self, embedding):
        plain, _ = type_node(embedding, "Outer").field_by_name("Plain")
        assert plain.doc() == "" and plain.comment() == ""
        plain.set_doc("Plain is plain.")
        plain.set_comment("trailing")
        assert plain.doc() == "Plain is plain.\n"
        assert plain.comment() == "trailing\n"
        text = format_node(type_node(embedding, "Outer").expr())
        assert "\t// Plain is plain.\n\tPlain int // trailing\n" in text
