"""Parser for Go declarations.

Types, fields, specs and function signatures are parsed into `go_ast` nodes.
Expressions are kept as raw runs of tokens, and a function body is kept as a
list of raw statements except for short variable declarations (":="), which
become `GoAssignStmt`s.
"""
import logging
from bisect import bisect_left

from ply import yacc

from .errors import GoSyntaxError
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
    inspect,
)
from .lexer import error_position, new_lexer, tokens  # noqa: F401
from .positions import NO_POS

start = "SourceFile"

openers = {"LBRACK", "LSQBRACK", "LCURLBR"}
closers = {"RBRACK", "RSQBRACK", "RCURLBR"}


def _pos(p, n):
    """Return the position of the n'th symbol, which must be a token."""
    return p.lexer.base + p.lexpos(n)


def _ident(p, n):
    return GoIdent(p[n], _pos(p, n))


def _token(p, n):
    return (p.slice[n].type, p[n], _pos(p, n))


def _source(p, pos, end):
    base = p.lexer.base
    return p.lexer.lexdata[pos - base : end - base]


def _syntax_error(p, msg, pos):
    line, column = error_position(p.lexer, pos - p.lexer.base)
    raise GoSyntaxError(msg, p.lexer.filename, line, column)


# Tokens which may follow a type parameter's name but never an operand
type_param_starts = {
    "ID",
    "MAP",
    "CHAN",
    "FUNC",
    "INTERFACE",
    "STRUCT",
    "TILDE",
}


def _is_type_params(length):
    """Check if an array length is a type parameter list, like "[T any]"."""
    if not isinstance(length, GoRawExpr) or len(length.tokens) < 2:
        return False
    first, second = length.tokens[0][0], length.tokens[1][0]
    return first == "ID" and second in type_param_starts


def _raw_parts(p, toks):
    """Return the (type, value) pairs, text, start and end of a token run."""
    pos = toks[0][2]
    end = toks[-1][2] + len(toks[-1][1])
    pairs = [(tok_type, value) for tok_type, value, _ in toks]
    return pairs, _source(p, pos, end), pos, end


def _split(toks, separator):
    """Split a token run at the separators which are not inside brackets."""
    parts = []
    current = []
    depth = 0
    for tok in toks:
        if tok[0] in openers:
            depth += 1
        elif tok[0] in closers:
            depth -= 1
        if tok[0] == separator and depth == 0:
            parts.append(current)
            current = []
        else:
            current.append(tok)
    parts.append(current)
    return parts


def _statement(p, toks):
    """Make a statement from the tokens of one statement in a body."""
    for i, tok in enumerate(toks):
        if tok[0] in openers:
            break
        if tok[0] != "SHDECL":
            continue
        lhs = toks[:i]
        rhs = [part for part in _split(toks[i + 1 :], "COMMA") if part]
        is_id_list = len(lhs) % 2 == 1 and all(
            item[0] == ("ID" if j % 2 == 0 else "COMMA")
            for j, item in enumerate(lhs)
        )
        if is_id_list and rhs:
            return GoAssignStmt(
                [GoIdent(value, pos) for _, value, pos in lhs[::2]],
                ":=",
                tok[2],
                [GoRawExpr(*_raw_parts(p, part)) for part in rhs],
            )
        break
    return GoRawStmt(*_raw_parts(p, toks))


def _group_params(p, decls, pos):
    """Group parameter declarations into fields.

    In "(a, b int)" the names without a type share the next type, so a
    parameter list is either fully named or fully unnamed.
    """
    if all(name is None for name, _ in decls):
        return [GoField([], dtype) for _, dtype in decls]

    fields = []
    pending = []
    for name, dtype in decls:
        if name is not None:
            fields.append(GoField(pending + [name], dtype))
            pending = []
        elif isinstance(dtype, GoIdent):
            pending.append(dtype)
        else:
            _syntax_error(p, "mixed named and unnamed parameters", pos)
    if pending:
        _syntax_error(p, "mixed named and unnamed parameters", pos)
    return fields


def _gen_decl(p):
    """Make a `GoGenDecl` from "KEYWORD Spec" or "KEYWORD ( SpecList )"."""
    tok_pos = _pos(p, 1)
    if len(p) == 3:  # Single spec
        return GoGenDecl(p[1], tok_pos, [p[2]])
    if len(p) == 4:  # Empty parentheses
        specs = []
    else:  # SpecList, with or without a trailing SEMICOLON
        specs = p[3]
    return GoGenDecl(p[1], tok_pos, specs, _pos(p, 2), _pos(p, len(p) - 1))


def _list(p):
    """Handle "List : Item | List SEPARATOR Item"."""
    if len(p) == 2:
        p[0] = [p[1]]
    else:
        p[0] = p[1] + [p[3]]


# =============================================================================
# BASIC
# =============================================================================


def p_empty(p):
    "empty :"


def p_error(p):
    if p is None:
        raise GoSyntaxError("unexpected end of file")
    line, column = error_position(p.lexer, p.lexpos)
    value = "newline" if p.value == "\n" else p.value
    raise GoSyntaxError(
        'unexpected token "{}"'.format(value), p.lexer.filename, line, column
    )


# =============================================================================
# TYPES
# =============================================================================


def p_Type(p):
    """Type : TypeName
            | TypeLit
    """
    p[0] = p[1]


def p_TypeName(p):
    """TypeName : ID
                | ID DOT ID
    """
    if len(p) == 2:
        p[0] = _ident(p, 1)
    else:
        p[0] = GoSelectorExpr(_ident(p, 1), _ident(p, 3))


def p_TypeLit(p):
    """TypeLit : ArrayType
               | SliceType
               | StructType
               | PointerType
               | FunctionType
               | InterfaceType
               | MapType
               | ChannelType
    """
    p[0] = p[1]


def p_ArrayType(p):
    """ArrayType : LSQBRACK Expression RSQBRACK Type
    """
    length = p[2]
    # Keep plain lengths as nodes that can be evaluated later
    if len(length.tokens) == 1 and length.tokens[0][0] == "INT":
        length = GoBasicLit("INT", length.text, length.pos)
    elif len(length.tokens) == 1 and length.tokens[0][0] == "ID":
        length = GoIdent(length.text, length.pos)
    p[0] = GoArrayType(_pos(p, 1), length, p[4])


def p_SliceType(p):
    """SliceType : LSQBRACK RSQBRACK Type
    """
    p[0] = GoArrayType(_pos(p, 1), None, p[3])


def p_StructType(p):
    """StructType : STRUCT LCURLBR FieldDeclList RCURLBR
                  | STRUCT LCURLBR FieldDeclList SEMICOLON RCURLBR
                  | STRUCT LCURLBR RCURLBR
    """
    fields = p[3] if len(p) > 4 else []
    p[0] = GoStructType(
        _pos(p, 1), GoFieldList(_pos(p, 2), fields, _pos(p, len(p) - 1))
    )


def p_FieldDeclList(p):
    """FieldDeclList : FieldDecl
                     | FieldDeclList SEMICOLON FieldDecl
    """
    _list(p)


def p_FieldDecl(p):
    """FieldDecl : IdentifierList Type Tag
                 | EmbeddedField Tag
    """
    if len(p) == 4:  # Explicit field
        p[0] = GoField(p[1], p[2], p[3])
    else:  # Embedded field
        p[0] = GoField([], p[1], p[2])


def p_EmbeddedField(p):
    """EmbeddedField : TypeName
                     | MULT TypeName
    """
    if len(p) == 2:
        p[0] = p[1]
    else:
        p[0] = GoStarExpr(_pos(p, 1), p[2])


def p_Tag(p):
    """Tag : STRING
           | empty
    """
    if p[1] is None:  # empty
        p[0] = None
    else:
        p[0] = GoBasicLit("STRING", p[1], _pos(p, 1))


def p_PointerType(p):
    """PointerType : MULT Type
    """
    p[0] = GoStarExpr(_pos(p, 1), p[2])


def p_FunctionType(p):
    """FunctionType : FUNC Signature
    """
    p[0] = GoFuncType(_pos(p, 1), *p[2])


def p_Signature(p):
    """Signature : Parameters
                 | Parameters Result
    """
    # First element is Parameters, second is Result
    if len(p) == 2:  # No result given
        p[0] = (p[1], None)
    else:
        p[0] = (p[1], p[2])


def p_Result(p):
    """Result : Parameters
              | Type
    """
    if isinstance(p[1], GoFieldList):  # Parameters
        p[0] = p[1]
    else:  # A single unnamed result
        p[0] = GoFieldList(NO_POS, [GoField([], p[1])], NO_POS)


def p_Parameters(p):
    """Parameters : LBRACK RBRACK
                  | LBRACK ParameterList RBRACK
                  | LBRACK ParameterList COMMA RBRACK
    """
    if len(p) == 3:  # Nothing in there
        fields = []
    else:  # COMMA doesn't matter
        fields = _group_params(p, p[2], _pos(p, 1))
    p[0] = GoFieldList(_pos(p, 1), fields, _pos(p, len(p) - 1))


def p_ParameterList(p):
    """ParameterList : ParameterDecl
                     | ParameterList COMMA ParameterDecl
    """
    _list(p)


def p_ParameterDecl(p):
    """ParameterDecl : Type
                     | ID Type
                     | ID TRIDOT Type
                     | TRIDOT Type
    """
    # A tuple of (name, type); names are grouped later
    if len(p) == 2:  # only type given
        p[0] = (None, p[1])
    elif len(p) == 3 and p.slice[1].type == "TRIDOT":
        p[0] = (None, GoEllipsis(_pos(p, 1), p[2]))
    elif len(p) == 3:
        p[0] = (_ident(p, 1), p[2])
    else:
        p[0] = (_ident(p, 1), GoEllipsis(_pos(p, 2), p[3]))


def p_InterfaceType(p):
    """InterfaceType : INTERFACE LCURLBR MethodSpecList RCURLBR
                     | INTERFACE LCURLBR MethodSpecList SEMICOLON RCURLBR
                     | INTERFACE LCURLBR RCURLBR
    """
    methods = p[3] if len(p) > 4 else []
    p[0] = GoInterfaceType(
        _pos(p, 1), GoFieldList(_pos(p, 2), methods, _pos(p, len(p) - 1))
    )


def p_MethodSpecList(p):
    """MethodSpecList : MethodSpec
                      | MethodSpecList SEMICOLON MethodSpec
    """
    _list(p)


def p_MethodSpec(p):
    """MethodSpec : ID Signature
                  | TypeName
    """
    if len(p) == 3:  # Function signature given
        p[0] = GoField([_ident(p, 1)], GoFuncType(NO_POS, *p[2]))
    else:  # Embedded interface
        p[0] = GoField([], p[1])


def p_MapType(p):
    """MapType : MAP LSQBRACK Type RSQBRACK Type
    """
    p[0] = GoMapType(_pos(p, 1), p[3], p[5])


def p_ChannelType(p):
    """ChannelType : CHAN Type
                   | CHAN REC Type
                   | REC CHAN Type
    """
    # "chan<- chan int" is a send-only channel of "chan int"
    if len(p) == 3:
        p[0] = GoChanType(_pos(p, 1), ChanDir.BOTH, p[2])
    elif p.slice[1].type == "CHAN":
        p[0] = GoChanType(_pos(p, 1), ChanDir.SEND, p[3])
    else:
        p[0] = GoChanType(_pos(p, 1), ChanDir.RECV, p[3])


# =============================================================================
# EXPRESSIONS
# =============================================================================


def p_ExpressionList(p):
    """ExpressionList : Expression
                      | ExpressionList COMMA Expression
    """
    _list(p)


def p_Expression(p):
    """Expression : ExprTokens
    """
    p[0] = GoRawExpr(*_raw_parts(p, p[1]))


def p_ExprTokens(p):
    """ExprTokens : ExprToken
                  | ExprTokens ExprToken
    """
    if len(p) == 2:
        p[0] = p[1]
    else:
        p[0] = p[1] + p[2]


def p_ExprToken(p):
    """ExprToken : Group
                 | ID
                 | INT
                 | FLOAT
                 | IMAG
                 | RUNE
                 | STRING
                 | PLUS
                 | MINUS
                 | MULT
                 | DIV
                 | MODULO
                 | BITAND
                 | BITOR
                 | BITXOR
                 | BITCLR
                 | LSHIFT
                 | RSHIFT
                 | LOGAND
                 | LOGOR
                 | LOGNOT
                 | EQUALS
                 | NOTEQ
                 | LESS
                 | LESSEQ
                 | GREAT
                 | GREATEQ
                 | REC
                 | TILDE
                 | DOT
                 | TRIDOT
                 | FUNC
                 | STRUCT
                 | MAP
                 | CHAN
                 | INTERFACE
    """
    if isinstance(p[1], list):  # Group
        p[0] = p[1]
    else:
        p[0] = [_token(p, 1)]


def p_Group(p):
    """Group : LBRACK BalancedTokens RBRACK
             | LSQBRACK BalancedTokens RSQBRACK
             | LCURLBR BalancedTokens RCURLBR
    """
    p[0] = [_token(p, 1)] + p[2] + [_token(p, 3)]


def p_BalancedTokens(p):
    """BalancedTokens : empty
                      | BalancedTokens BalancedToken
    """
    if len(p) == 2:  # empty
        p[0] = []
    else:
        p[0] = p[1] + p[2]


def p_BalancedToken(p):
    """BalancedToken : ExprToken
                     | COMMA
                     | SEMICOLON
                     | COLON
                     | ASSIGN
                     | SHDECL
                     | PLUSEQ
                     | MINUSEQ
                     | MULTEQ
                     | DIVEQ
                     | MODEQ
                     | BITANDEQ
                     | BITOREQ
                     | BITXOREQ
                     | LSHIFTEQ
                     | RSHIFTEQ
                     | BITCLREQ
                     | INCR
                     | DECR
                     | BREAK
                     | CASE
                     | CONST
                     | CONTINUE
                     | DEFAULT
                     | DEFER
                     | ELSE
                     | FALLTHROUGH
                     | FOR
                     | GO
                     | GOTO
                     | IF
                     | IMPORT
                     | PACKAGE
                     | RANGE
                     | RETURN
                     | SELECT
                     | SWITCH
                     | TYPE
                     | VAR
    """
    if isinstance(p[1], list):  # ExprToken
        p[0] = p[1]
    else:
        p[0] = [_token(p, 1)]


# =============================================================================
# BLOCKS
# =============================================================================


def p_Block(p):
    """Block : LCURLBR BalancedTokens RCURLBR
    """
    statements = [
        _statement(p, toks) for toks in _split(p[2], "SEMICOLON") if toks
    ]
    lbrace = _pos(p, 1)
    rbrace = _pos(p, 3)
    p[0] = GoBlockStmt(
        lbrace, statements, rbrace, _source(p, lbrace, rbrace + 1)
    )


# =============================================================================
# DECLARATIONS AND SCOPE
# =============================================================================


def p_TopLevelDeclList(p):
    """TopLevelDeclList : TopLevelDeclList TopLevelDecl SEMICOLON
                        | empty
    """
    if len(p) == 2:  # empty
        p[0] = []
    else:
        p[0] = p[1] + [p[2]]


def p_TopLevelDecl(p):
    """TopLevelDecl : ConstDecl
                    | TypeDecl
                    | VarDecl
                    | FunctionDecl
                    | MethodDecl
    """
    p[0] = p[1]


def p_ConstDecl(p):
    """ConstDecl : CONST ConstSpec
                 | CONST LBRACK ConstSpecList RBRACK
                 | CONST LBRACK ConstSpecList SEMICOLON RBRACK
                 | CONST LBRACK RBRACK
    """
    p[0] = _gen_decl(p)


def p_ConstSpecList(p):
    """ConstSpecList : ConstSpec
                     | ConstSpecList SEMICOLON ConstSpec
    """
    _list(p)


def p_ConstSpec(p):
    """ConstSpec : IdentifierList
                 | IdentifierList Type ASSIGN ExpressionList
                 | IdentifierList ASSIGN ExpressionList
    """
    if len(p) == 2:  # Repeats the previous spec
        p[0] = GoValueSpec(p[1])
    elif len(p) == 5:
        p[0] = GoValueSpec(p[1], p[2], p[4])
    else:
        p[0] = GoValueSpec(p[1], None, p[3])


def p_IdentifierList(p):
    """IdentifierList : ID
                      | IdentifierList COMMA ID
    """
    if len(p) == 2:
        p[0] = [_ident(p, 1)]
    else:
        p[0] = p[1] + [_ident(p, 3)]


def p_TypeDecl(p):
    """TypeDecl : TYPE TypeSpec
                | TYPE LBRACK TypeSpecList RBRACK
                | TYPE LBRACK TypeSpecList SEMICOLON RBRACK
                | TYPE LBRACK RBRACK
    """
    p[0] = _gen_decl(p)


def p_TypeSpecList(p):
    """TypeSpecList : TypeSpec
                    | TypeSpecList SEMICOLON TypeSpec
    """
    _list(p)


def p_TypeSpec(p):
    """TypeSpec : ID Type
                | ID ASSIGN Type
    """
    typ = p[len(p) - 1]
    if isinstance(typ, GoArrayType) and _is_type_params(typ.len):
        _syntax_error(p, "type parameters are not supported", typ.len.pos)
    if len(p) == 3:  # Type definition
        p[0] = GoTypeSpec(_ident(p, 1), p[2])
    else:  # Alias declaration
        p[0] = GoTypeSpec(_ident(p, 1), p[3], _pos(p, 2))


def p_VarDecl(p):
    """VarDecl : VAR VarSpec
               | VAR LBRACK VarSpecList RBRACK
               | VAR LBRACK VarSpecList SEMICOLON RBRACK
               | VAR LBRACK RBRACK
    """
    p[0] = _gen_decl(p)


def p_VarSpecList(p):
    """VarSpecList : VarSpec
                   | VarSpecList SEMICOLON VarSpec
    """
    _list(p)


def p_VarSpec(p):
    """VarSpec : IdentifierList Type
               | IdentifierList Type ASSIGN ExpressionList
               | IdentifierList ASSIGN ExpressionList
    """
    if len(p) == 3:  # No values given
        p[0] = GoValueSpec(p[1], p[2])
    elif len(p) == 5:
        p[0] = GoValueSpec(p[1], p[2], p[4])
    else:  # No type given
        p[0] = GoValueSpec(p[1], None, p[3])


def p_FunctionDecl(p):
    """FunctionDecl : FUNC ID Signature
                    | FUNC ID Signature Block
    """
    body = p[4] if len(p) == 5 else None
    p[0] = GoFuncDecl(None, _ident(p, 2), GoFuncType(_pos(p, 1), *p[3]), body)


def p_MethodDecl(p):
    """MethodDecl : FUNC Parameters ID Signature
                  | FUNC Parameters ID Signature Block
    """
    body = p[5] if len(p) == 6 else None
    p[0] = GoFuncDecl(
        p[2], _ident(p, 3), GoFuncType(_pos(p, 1), *p[4]), body
    )


# =============================================================================
# PACKAGES
# =============================================================================


def p_SourceFile(p):
    """SourceFile : PACKAGE ID SEMICOLON ImportDeclList TopLevelDeclList
    """
    p[0] = GoFile(_pos(p, 1), _ident(p, 2), p[4] + p[5])


def p_ImportDeclList(p):
    """ImportDeclList : ImportDeclList ImportDecl SEMICOLON
                      | empty
    """
    if len(p) == 2:  # empty
        p[0] = []
    else:
        p[0] = p[1] + [p[2]]


def p_ImportDecl(p):
    """ImportDecl : IMPORT ImportSpec
                  | IMPORT LBRACK ImportSpecList RBRACK
                  | IMPORT LBRACK ImportSpecList SEMICOLON RBRACK
                  | IMPORT LBRACK RBRACK
    """
    p[0] = _gen_decl(p)


def p_ImportSpecList(p):
    """ImportSpecList : ImportSpec
                      | ImportSpecList SEMICOLON ImportSpec
    """
    _list(p)


def p_ImportSpec(p):
    """ImportSpec : STRING
                  | ID STRING
                  | DOT STRING
    """
    if len(p) == 2:  # No alias
        p[0] = GoImportSpec(None, GoBasicLit("STRING", p[1], _pos(p, 1)))
    else:
        p[0] = GoImportSpec(
            _ident(p, 1), GoBasicLit("STRING", p[2], _pos(p, 2))
        )


parser = yacc.yacc(debug=False, write_tables=False, errorlog=yacc.NullLogger())


# =============================================================================
# COMMENTS
# =============================================================================


def _comment_groups(comments, source, base):
    """Group comments not separated by tokens or by an empty line."""
    groups = []
    current = []
    for text, offset in comments:
        if current:
            prev_text, prev_offset = current[-1]
            between = source[prev_offset + len(prev_text) : offset]
            if between.strip() != "" or between.count("\n") > 1:
                groups.append(current)
                current = []
        current.append((text, offset))
    if current:
        groups.append(current)
    return [
        GoCommentGroup(
            [GoComment(text, base + offset) for text, offset in group]
        )
        for group in groups
    ]


def _attach_comments(go_file, groups, source, base):
    """Set the doc and line comments of declarations, specs and fields.

    A doc comment is a group starting its own line and ending on the line
    right before the node. A line comment is a group starting on the line
    where the node ends.
    """
    ends = [group.end for group in groups]
    starts = [group.pos for group in groups]

    def lead_comment(node):
        i = bisect_left(ends, node.pos + 1) - 1
        if i < 0:
            return None
        group = groups[i]
        offset = group.pos - base
        line_start = source.rfind("\n", 0, offset) + 1
        if source[line_start:offset].strip() != "":
            return None
        between = source[group.end - base : node.pos - base]
        if between.strip() != "" or between.count("\n") != 1:
            return None
        return group

    def line_comment(node):
        i = bisect_left(starts, node.end)
        if i >= len(groups):
            return None
        group = groups[i]
        between = source[node.end - base : group.pos - base]
        if between.strip() != "" or "\n" in between:
            return None
        return group

    go_file.doc = lead_comment(go_file)
    for decl in go_file.decls:
        decl.doc = lead_comment(decl)
        if isinstance(decl, GoGenDecl):
            for spec in decl.specs:
                if decl.lparen != NO_POS:
                    spec.doc = lead_comment(spec)
                spec.comment = line_comment(spec)

    def visit(node):
        if isinstance(node, (GoStructType, GoInterfaceType)):
            field_list = (
                node.fields
                if isinstance(node, GoStructType)
                else node.methods
            )
            for field in field_list.list:
                field.doc = lead_comment(field)
                field.comment = line_comment(field)
        return True

    for decl in go_file.decls:
        inspect(decl, visit)


def parse_file(fset, filename, source):
    """Parse a Go source file.

    Args:
        fset (`FileSet`): The file set to register the file in
        filename (str): The name of the file
        source (str): The source code

    Returns:
        `GoFile`: The syntax tree, with doc and line comments attached

    Raises:
        GoSyntaxError: If the source cannot be parsed

    """
    src_file = fset.add_file(filename, source)
    go_lexer = new_lexer(source, filename, src_file.base)
    try:
        go_file = parser.parse(lexer=go_lexer)
    except GoSyntaxError as err:
        if not err.filename:
            err.filename = filename
        raise
    go_file.filename = filename
    go_file.end = src_file.base + src_file.size

    groups = _comment_groups(go_lexer.comments, source, src_file.base)
    go_file.comments = groups
    _attach_comments(go_file, groups, source, src_file.base)
    logging.debug(
        "parsed {}: {} declarations, {} comment groups".format(
            filename, len(go_file.decls), len(groups)
        )
    )
    return go_file
