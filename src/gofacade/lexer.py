"""Lexer for Go.

Semicolons are inserted as in the Go language: a newline (or a general
comment spanning lines) ends the statement if the line's final token was an
identifier, a literal, one of a few keywords or a closing operator.
"""
import re

from ply import lex
from ply.lex import TOKEN

from .errors import GoSyntaxError

# Operator and punctuation -> token name
operators = {
    "+": "PLUS",
    "-": "MINUS",
    "*": "MULT",
    "/": "DIV",
    "%": "MODULO",
    "&": "BITAND",
    "|": "BITOR",
    "^": "BITXOR",
    "<<": "LSHIFT",
    ">>": "RSHIFT",
    "&^": "BITCLR",
    "+=": "PLUSEQ",
    "-=": "MINUSEQ",
    "*=": "MULTEQ",
    "/=": "DIVEQ",
    "%=": "MODEQ",
    "&=": "BITANDEQ",
    "|=": "BITOREQ",
    "^=": "BITXOREQ",
    "<<=": "LSHIFTEQ",
    ">>=": "RSHIFTEQ",
    "&^=": "BITCLREQ",
    "&&": "LOGAND",
    "||": "LOGOR",
    "<-": "REC",
    "++": "INCR",
    "--": "DECR",
    "==": "EQUALS",
    "<": "LESS",
    ">": "GREAT",
    "=": "ASSIGN",
    "!": "LOGNOT",
    "~": "TILDE",
    "!=": "NOTEQ",
    "<=": "LESSEQ",
    ">=": "GREATEQ",
    ":=": "SHDECL",
    "...": "TRIDOT",
    "(": "LBRACK",
    ")": "RBRACK",
    "[": "LSQBRACK",
    "]": "RSQBRACK",
    "{": "LCURLBR",
    "}": "RCURLBR",
    ",": "COMMA",
    ";": "SEMICOLON",
    ".": "DOT",
    ":": "COLON",
}

reserved = frozenset(
    """
    break case chan const continue default defer else fallthrough for func
    go goto if import interface map package range return select struct
    switch type var
    """.split()
)

tokens = [
    "COMMENT",
    "IMAG",
    "FLOAT",
    "INT",
    "ID",
    "RUNE",
    "STRING",
    "OP",
    "NEWLINES",
]
tokens += sorted(word.upper() for word in reserved)
tokens += list(operators.values())

# A newline after one of these ends the statement
closing_ops = frozenset(["++", "--", ")", "]", "}"])
closing_keywords = frozenset(["break", "continue", "fallthrough", "return"])

# Longest operators first, so that "<<=" is not read as "<<" and "="
op_regex = "|".join(
    re.escape(op) for op in sorted(operators, key=len, reverse=True)
)

escape_seq = (
    r"\\([0-7]{3}|x[0-9a-fA-F]{2}|u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}"
    r"|[abfnrtv\\'\"])"
)
rune_regex = r"'(" + escape_seq + r"|[^'\\\n])'"

digits = r"[0-9](_?[0-9])*"
int_regex = (
    r"(0[xX](_?[0-9a-fA-F])+"
    r"|0[bB](_?[01])+"
    r"|0[oO]?(_?[0-7])*"
    r"|[1-9](_?[0-9])*)"
)
exponent = r"[eE][+-]?" + digits
float_regex = (
    r"(" + digits + r"\.(" + digits + r")?(" + exponent + r")?"
    r"|" + digits + exponent
    + r"|\." + digits + r"(" + exponent + r")?)"
)
imag_regex = r"(" + float_regex + r"|" + digits + r")i"


def t_COMMENT(t):
    r"(//[^\n]*|/\*(\*(?!/)|[^*])*\*/)"
    t.lexer.comments.append((t.value, t.lexpos))
    lines = t.value.count("\n")
    t.lexer.lineno += lines
    if lines and t.lexer.last:
        t.type = "SEMICOLON"
        t.lexer.last = False
        return t


@TOKEN(imag_regex)
def t_IMAG(t):
    t.lexer.last = True
    return t


@TOKEN(float_regex)
def t_FLOAT(t):
    t.lexer.last = True
    return t


@TOKEN(int_regex)
def t_INT(t):
    t.lexer.last = True
    return t


def t_ID(t):
    r"[^\W\d]\w*"
    if t.value in reserved:
        t.type = t.value.upper()
        t.lexer.last = t.value in closing_keywords
    else:
        t.lexer.last = True
    return t


@TOKEN(rune_regex)
def t_RUNE(t):
    t.lexer.last = True
    return t


def t_STRING(t):
    r"(\"(\\[^\n]|[^\"\\\n])*\"|`[^`]*`)"
    # Raw strings may span lines
    t.lexer.lineno += t.value.count("\n")
    t.lexer.last = True
    return t


@TOKEN(op_regex)
def t_OP(t):
    t.type = operators[t.value]
    t.lexer.last = t.value in closing_ops
    return t


def t_NEWLINES(t):
    r"\n+"
    t.lexer.lineno += len(t.value)
    if t.lexer.last:
        t.type = "SEMICOLON"
        t.lexer.last = False
        return t


def error_position(lexer, lexpos):
    """Return the (line, column) of an offset in the lexer's input."""
    data = lexer.lexdata
    line = data.count("\n", 0, lexpos) + 1
    column = lexpos - (data.rfind("\n", 0, lexpos) + 1) + 1
    return line, column


def t_error(t):
    line, column = error_position(t.lexer, t.lexpos)
    raise GoSyntaxError(
        'unexpected character "{}"'.format(t.value[0]),
        t.lexer.filename,
        line,
        column,
    )


t_ignore = " \t\r"

lexer = lex.lex()


def new_lexer(source, filename="", base=1):
    """Return a fresh lexer reading source.

    Args:
        source (str): The source code
        filename (str): The file name used in error messages
        base (int): The position of the file's first byte in its `FileSet`

    Returns:
        The lexer; its ``comments`` attribute collects (text, offset) pairs
        while tokens are read.

    """
    new = lexer.clone()
    new.filename = filename
    new.base = base
    new.last = False
    new.comments = []
    new.lineno = 1
    # The final newline lets the last line end with an inserted semicolon
    new.input(source + "\n")
    return new


def tokenize(source, filename=""):
    """Return the list of tokens in source (comments are left out)."""
    go_lexer = new_lexer(source, filename)
    return list(iter(go_lexer.token, None))
