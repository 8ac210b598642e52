"""Load Go packages from files and source roots into a `Program`."""
import json
import logging
import os

from .checker import check_package
from .errors import GoException, GoSyntaxError, GoTypeError
from .package import PackageInfo
from .parser import parse_file
from .program import Program


class Config:
    """The configuration of a load.

    Attributes:
        source_roots (list of str): Directories in which an import path
            "a/b" is looked for as the sub-directory "a/b"
        include_tests (bool): Whether "_test.go" files of imported packages
            are loaded
        allow_errors (bool): Whether packages with errors are kept; if false,
            `load` raises the first error of an initial package

    """

    fields = ("source_roots", "include_tests", "allow_errors")

    def __init__(
        self, source_roots=None, include_tests=False, allow_errors=True
    ):
        self.source_roots = list(source_roots) if source_roots else []
        self.include_tests = include_tests
        self.allow_errors = allow_errors
        self.created = []  # (path, list of (filename, source))
        self.imports = []  # Import paths

    @classmethod
    def from_json(cls, path):
        """Read a config from a JSON object with the config's fields.

        Raises:
            ValueError: If the file holds anything but those fields

        """
        with open(path, "r") as config_file:
            values = json.load(config_file)
        if not isinstance(values, dict):
            raise ValueError("config {} is not a JSON object".format(path))
        unknown = sorted(set(values) - set(cls.fields))
        if unknown:
            raise ValueError(
                "unknown config keys in {}: {}".format(
                    path, ", ".join(unknown)
                )
            )
        return cls(**values)

    def create_from_filenames(self, path, *filenames):
        """Request a package made of the given files.

        The files are read at once.
        """
        sources = []
        for filename in filenames:
            with open(filename, "r") as go:
                sources.append((filename, go.read()))
        self.created.append((path, sources))

    def create_from_sources(self, path, sources):
        """Request a package made of in-memory sources.

        sources is a dict, or a list of pairs, mapping file names to code.
        """
        if isinstance(sources, dict):
            sources = list(sources.items())
        self.created.append((path, list(sources)))

    def import_path(self, path):
        """Request the package with the import path from the source roots."""
        self.imports.append(path)

    def load(self):
        """Load the requested packages and their dependencies.

        Returns:
            `Program`: The program; each package's errors are recorded in it

        Raises:
            GoException: If allow_errors is false and an initial package has
                errors

        """
        prog = Program()
        loader = Loader(self, prog)
        for path, sources in self.created:
            prog.created.append(loader.build(path, sources, False))
        for path in self.imports:
            pkg = loader.import_package(path)
            if pkg is None:
                raise GoException(
                    'cannot find package "{}" in any of: {}'.format(
                        path, ", ".join(self.source_roots) or "(none)"
                    )
                )
            prog.imported[path] = pkg

        if not self.allow_errors:
            for pkg in prog.initial_packages():
                if pkg.errors:
                    raise pkg.errors[0]
        return prog


class Loader:
    """For loading packages depth-first, following their imports."""

    def __init__(self, config, prog):
        self.config = config
        self.prog = prog
        self.packages = {}  # Import path -> `PackageInfo` (or None)
        self.loading = []  # Import paths being loaded, outermost first

    def find_package_dir(self, path):
        for root in self.config.source_roots:
            directory = os.path.join(root, *path.split("/"))
            if os.path.isdir(directory):
                return directory
        return None

    def package_files(self, directory):
        filenames = []
        for name in sorted(os.listdir(directory)):
            filename = os.path.join(directory, name)
            if not name.endswith(".go") or not os.path.isfile(filename):
                continue
            if name.endswith("_test.go") and not self.config.include_tests:
                continue
            filenames.append(filename)
        return filenames

    def import_package(self, path):
        """Return the package with the import path, loading it if needed.

        Returns None if the package cannot be found.
        """
        if path in self.packages:
            return self.packages[path]
        directory = self.find_package_dir(path)
        if directory is None:
            logging.info("Package {} not found".format(path))
            self.packages[path] = None
            return None

        sources = []
        for filename in self.package_files(directory):
            with open(filename, "r") as go:
                sources.append((filename, go.read()))
        return self.build(path, sources, True)

    def build(self, path, sources, importable):
        """Parse, check and index one package.

        Files with syntax errors are left out; their errors are recorded
        with the package's type errors.
        """
        logging.info("Loading package {}...".format(path))
        self.loading.append(path)
        errors = []
        files = []
        for filename, source in sources:
            try:
                files.append(parse_file(self.prog.fset, filename, source))
            except GoSyntaxError as err:
                logging.debug("Skipping {}: {}".format(filename, err))
                errors.append(err)

        def importer(import_path):
            if import_path in self.loading:
                cycle = self.loading[self.loading.index(import_path) :]
                errors.append(
                    GoTypeError(
                        "import cycle not allowed: {}".format(
                            " -> ".join(cycle + [import_path])
                        )
                    )
                )
                return None
            dep = self.import_package(import_path)
            return None if dep is None else dep.pkg

        pkg, info, type_errors = check_package(
            self.prog.fset, path, files, importer
        )
        self.loading.pop()
        errors.extend(type_errors)

        error_free = not errors
        for imported in pkg.imports:
            dep = self.packages.get(imported.path)
            if dep is not None and not dep.transitively_error_free:
                error_free = False
            elif imported.fake:
                error_free = False

        pkg_info = PackageInfo(
            self.prog, pkg, files, info, errors, importable, error_free
        )
        if importable:
            self.packages[path] = pkg_info
        self.prog.all_packages.append(pkg_info)
        pkg_info.check()
        return pkg_info
