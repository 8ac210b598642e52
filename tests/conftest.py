"""Shared Go sources and loaders for the tests."""
import textwrap

import pytest

from gofacade.loader import Config
from gofacade.parser import parse_file
from gofacade.positions import FileSet

SHAPES = """\
// Package shapes has plane figures.
package shapes

// Shape is a plane figure.
type Shape interface {
	// Area returns the area.
	Area() float64
	Perimeter() float64
}

// Rect is a rectangle.
type Rect struct {
	W, H float64
}

// Area of the rectangle.
func (r Rect) Area() float64 {
	return r.W * r.H
}

func (r *Rect) Perimeter() float64 {
	return 2 * (r.W + r.H)
}

type Circle struct {
	R float64
}

func (c Circle) Area() float64 {
	return 3 * c.R * c.R
}

// Sides of a rectangle.
const Sides = 4

var Unit = Rect{W: 1, H: 1}

func NewRect(w, h float64) *Rect {
	r := &Rect{W: w, H: h}
	return r
}
"""

EMBEDDING = """\
package embed

type Base struct {
	ID int
}

type Outer struct {
	// Embedded by value.
	Base
	Name string `json:"name,omitempty" xml:"n"`
	Bad  int    `json:name`
	A, B int    `db:"x"`
	Plain int
}

type PtrOuter struct {
	// Embedded by pointer.
	*Base
}

const N = 4

type Arr [3]int

type ArrN [N]int

type Sl []int

type Table map[string]int

type Recv <-chan int

type Handler func(int) error

type Count int

type Other = Base
"""


def dedent(source):
    return textwrap.dedent(source).lstrip("\n")


def load(path, source, **kwargs):
    """Load a package made of one in-memory file."""
    config = Config(**kwargs)
    config.create_from_sources(path, {path + ".go": dedent(source)})
    return config.load()


def write_package(root, path, files):
    """Write a package directory under root and return it."""
    directory = root.joinpath(*path.split("/"))
    directory.mkdir(parents=True, exist_ok=True)
    for name, source in files.items():
        directory.joinpath(name).write_text(dedent(source))
    return directory


@pytest.fixture
def parse():
    def parse_source(source, filename="a.go"):
        return parse_file(FileSet(), filename, dedent(source))

    return parse_source


@pytest.fixture
def shapes():
    return load("shapes", SHAPES).created[0]


@pytest.fixture
def embedding():
    return load("embed", EMBEDDING).created[0]


@pytest.fixture
def load_go():
    return load


@pytest.fixture
def go_tree(tmp_path):
    """Return a function writing packages under a temporary source root."""

    def write(path, files):
        return write_package(tmp_path, path, files)

    write.root = tmp_path
    return write
