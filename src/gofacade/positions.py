"""Source positions shared by every file of one analysis session.

A position is a plain integer. Each file added to a `FileSet` owns the
interval ``[base, base + size]``, so a position alone identifies both the file
and the byte offset inside it. ``NO_POS`` (zero) is never a valid position.
"""
from bisect import bisect_right

NO_POS = 0


class Position:
    """For a human readable position (filename, line, column)."""

    def __init__(self, filename="", offset=0, line=0, column=0):
        self.filename = filename
        self.offset = offset
        self.line = line
        self.column = column

    def is_valid(self):
        return self.line > 0

    def __str__(self):
        if not self.is_valid():
            return self.filename or "-"
        if self.filename:
            return "{}:{}:{}".format(self.filename, self.line, self.column)
        return "{}:{}".format(self.line, self.column)

    def __repr__(self):
        return "Position({!r})".format(str(self))


class SourceFile:
    """For a single file registered in a `FileSet`."""

    def __init__(self, name, base, source):
        self.name = name
        self.base = base
        self.size = len(source)
        # Offsets at which each line starts
        self.lines = [0]
        for i, char in enumerate(source):
            if char == "\n":
                self.lines.append(i + 1)

    def contains(self, pos):
        return self.base <= pos <= self.base + self.size

    def pos(self, offset):
        """Return the position for the given byte offset in this file."""
        if offset < 0 or offset > self.size:
            raise ValueError(
                "offset {} out of range for file {}".format(offset, self.name)
            )
        return self.base + offset

    def offset(self, pos):
        if not self.contains(pos):
            raise ValueError(
                "position {} not in file {}".format(pos, self.name)
            )
        return pos - self.base

    def position(self, pos):
        offset = self.offset(pos)
        line = bisect_right(self.lines, offset)
        column = offset - self.lines[line - 1] + 1
        return Position(self.name, offset, line, column)


class FileSet:
    """For the set of source files of one analysis session."""

    def __init__(self):
        self.base = 1
        self.files = []

    def add_file(self, name, source):
        """Register a file and return its `SourceFile`.

        Args:
            name (str): The file name used in positions
            source (str): The full text of the file

        Returns:
            `SourceFile`: The registered file

        """
        src_file = SourceFile(name, self.base, source)
        self.files.append(src_file)
        # One extra slot so that the end-of-file position is unique
        self.base += src_file.size + 1
        return src_file

    def file(self, pos):
        """Return the file containing the position, or None."""
        if pos == NO_POS:
            return None
        bases = [src_file.base for src_file in self.files]
        i = bisect_right(bases, pos) - 1
        if i >= 0 and self.files[i].contains(pos):
            return self.files[i]
        return None

    def position(self, pos):
        src_file = self.file(pos)
        if src_file is None:
            return Position()
        return src_file.position(pos)
