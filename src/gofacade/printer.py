"""Render syntax nodes as Go source text, gofmt-style."""
from .go_ast import (
    ChanDir,
    GoArrayType,
    GoAssignStmt,
    GoBasicLit,
    GoBlockStmt,
    GoChanType,
    GoComment,
    GoCommentGroup,
    GoEllipsis,
    GoField,
    GoFieldList,
    GoFile,
    GoFuncDecl,
    GoFuncType,
    GoGenDecl,
    GoIdent,
    GoImportSpec,
    GoInterfaceType,
    GoMapType,
    GoRawExpr,
    GoRawStmt,
    GoSelectorExpr,
    GoStarExpr,
    GoStructType,
    GoTypeSpec,
    GoValueSpec,
)


def _indent(text, depth):
    prefix = "\t" * depth
    return "\n".join(
        prefix + line if line else line for line in text.split("\n")
    )


def _comments(group):
    if group is None:
        return ""
    return "\n".join(comment.text for comment in group.list)


def _with_doc(doc, text):
    if doc is None:
        return text
    return _comments(doc) + "\n" + text


def _with_comment(text, comment):
    if comment is None:
        return text
    return text + " " + _comments(comment)


def _names(idents):
    return ", ".join(ident.name for ident in idents)


def _params(field_list):
    parts = []
    for field in field_list.list:
        if field.names:
            parts.append(
                "{} {}".format(_names(field.names), format_node(field.type))
            )
        else:
            parts.append(format_node(field.type))
    return "(" + ", ".join(parts) + ")"


def _signature(func_type):
    output = _params(func_type.params)
    results = func_type.results
    if results is None or not results.list:
        return output
    if len(results.list) == 1 and not results.list[0].names:
        return output + " " + format_node(results.list[0].type)
    return output + " " + _params(results)


def _field_lines(field_list, in_interface):
    lines = []
    for field in field_list.list:
        if in_interface and field.names:
            line = field.names[0].name + _signature(field.type)
        elif field.names:
            line = "{} {}".format(_names(field.names), format_node(field.type))
        else:
            line = format_node(field.type)
        if field.tag is not None:
            line += " " + field.tag.value
        line = _with_comment(line, field.comment)
        lines.append(_with_doc(field.doc, line))
    return lines


def _braced(keyword, field_list, in_interface):
    lines = _field_lines(field_list, in_interface)
    if not lines:
        return keyword + "{}"
    return "{} {{\n{}\n}}".format(keyword, _indent("\n".join(lines), 1))


def _spec(spec):
    if isinstance(spec, GoImportSpec):
        if spec.name is None:
            return spec.path.value
        return "{} {}".format(spec.name.name, spec.path.value)
    if isinstance(spec, GoTypeSpec):
        if spec.assign:
            return "{} = {}".format(spec.name.name, format_node(spec.type))
        return "{} {}".format(spec.name.name, format_node(spec.type))
    # GoValueSpec
    output = _names(spec.names)
    if spec.type is not None:
        output += " " + format_node(spec.type)
    if spec.values:
        values = [format_node(value) for value in spec.values]
        output += " = " + ", ".join(values)
    return output


def format_node(node):
    """Return the Go source text for node.

    Doc comments of declarations, specs and fields are included; function
    bodies are reproduced as written.

    Raises:
        TypeError: For an object which is not a supported syntax node

    """
    if isinstance(node, GoIdent):
        return node.name
    elif isinstance(node, GoBasicLit):
        return node.value
    elif isinstance(node, (GoRawExpr, GoRawStmt, GoBlockStmt)):
        return node.text
    elif isinstance(node, GoSelectorExpr):
        return "{}.{}".format(format_node(node.x), node.sel.name)
    elif isinstance(node, GoStarExpr):
        return "*" + format_node(node.x)
    elif isinstance(node, GoEllipsis):
        return "..." + format_node(node.elt)
    elif isinstance(node, GoArrayType):
        length = "" if node.len is None else format_node(node.len)
        return "[{}]{}".format(length, format_node(node.elt))
    elif isinstance(node, GoMapType):
        return "map[{}]{}".format(
            format_node(node.key), format_node(node.value)
        )
    elif isinstance(node, GoChanType):
        if node.dir == ChanDir.SEND:
            return "chan<- " + format_node(node.value)
        elif node.dir == ChanDir.RECV:
            return "<-chan " + format_node(node.value)
        return "chan " + format_node(node.value)
    elif isinstance(node, GoFuncType):
        return "func" + _signature(node)
    elif isinstance(node, GoStructType):
        return _braced("struct", node.fields, False)
    elif isinstance(node, GoInterfaceType):
        return _braced("interface", node.methods, True)
    elif isinstance(node, GoField):
        return "\n".join(_field_lines(GoFieldList(0, [node], 0), False))
    elif isinstance(node, GoFieldList):
        return _params(node)
    elif isinstance(node, (GoImportSpec, GoTypeSpec, GoValueSpec)):
        return _spec(node)
    elif isinstance(node, GoGenDecl):
        if node.lparen:
            lines = [
                _with_doc(spec.doc, _with_comment(_spec(spec), spec.comment))
                for spec in node.specs
            ]
            if lines:
                body = _indent("\n".join(lines), 1)
                text = "{} (\n{}\n)".format(node.tok, body)
            else:
                text = node.tok + " ()"
        else:
            spec = node.specs[0]
            text = _with_comment(
                "{} {}".format(node.tok, _spec(spec)), spec.comment
            )
        return _with_doc(node.doc, text)
    elif isinstance(node, GoFuncDecl):
        text = "func "
        if node.recv is not None:
            text += _params(node.recv) + " "
        text += node.name.name + _signature(node.type)
        if node.body is not None:
            text += " " + node.body.text
        return _with_doc(node.doc, text)
    elif isinstance(node, GoAssignStmt):
        return "{} {} {}".format(
            _names(node.lhs),
            node.tok,
            ", ".join(format_node(value) for value in node.rhs),
        )
    elif isinstance(node, (GoComment, GoCommentGroup)):
        if isinstance(node, GoComment):
            return node.text
        return _comments(node)
    elif isinstance(node, GoFile):
        parts = ["package " + node.name.name]
        parts += [format_node(decl) for decl in node.decls]
        return _with_doc(node.doc, "\n\n".join(parts)) + "\n"
    raise TypeError("can not format {}".format(type(node).__name__))
