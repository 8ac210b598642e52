"""Exceptions raised for Go source code and facade edits."""


class GoException(Exception):
    """Simply for catching errors in the source code."""

    pass


class GoSyntaxError(GoException):
    """For lexing and parsing errors in a source file."""

    def __init__(self, msg, filename="", line=0, column=0):
        self.msg = msg
        self.filename = filename
        self.line = line
        self.column = column
        super().__init__(str(self))

    def __str__(self):
        return "{}:{}:{}: {}".format(
            self.filename, self.line, self.column, self.msg
        )


class GoTypeError(GoException):
    """For errors found while checking declarations.

    These are recorded in the package's error list and never abort the
    classification of the package.
    """

    def __init__(self, msg, position=None):
        self.msg = msg
        self.position = position
        super().__init__(str(self))

    def __str__(self):
        if self.position is None or not self.position.is_valid():
            return self.msg
        return "{}: {}".format(self.position, self.msg)


class MethodError(GoException):
    """For methods which cannot be attached to a type node."""

    pass


class TagSyntaxError(GoException):
    """For malformed struct field tags."""

    pass
