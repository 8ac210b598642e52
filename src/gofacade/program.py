"""The index of every package loaded in one analysis session."""
from .positions import FileSet


class Program:
    """For the packages of one analysis session.

    Initial packages are the ones requested when loading, either created
    from files or imported by path. All packages additionally includes their
    dependencies, in the order they were loaded.
    """

    def __init__(self, fset=None):
        self.fset = fset if fset is not None else FileSet()
        self.created = []  # `PackageInfo`s created from files
        self.imported = {}  # Import path -> `PackageInfo` imported initially
        self.all_packages = []  # `PackageInfo`s in load order

    def initial_packages(self):
        return self.created + list(self.imported.values())

    def package(self, path):
        """Return the loaded package with the import path, or None."""
        for pkg in self.all_packages:
            if pkg.path() == path:
                return pkg
        return None

    def inspect(self, fn):
        """Call fn with each initial facade until it returns false."""
        for pkg in self.initial_packages():
            for facade in pkg.facades:
                if not fn(facade):
                    return

    def lookup(self, decl_kinds=0, type_kinds=0, name=""):
        """Return the facades of the initial packages matching the filters.

        See `PackageInfo.lookup` for the filters.
        """
        found = []
        for pkg in self.initial_packages():
            found.extend(pkg.lookup(decl_kinds, type_kinds, name))
        return found

    def find_facade(self, typ):
        """Return the facade declaring typ in any loaded package.

        Dependencies which were not requested are searched too, since types
        from them appear in the initial packages.
        """
        for pkg in self.all_packages:
            facade, found = pkg.find_facade(typ)
            if found:
                return facade, True
        return None, False
