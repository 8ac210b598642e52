"""Command line interface for gofacade."""
import logging
import os
import sys
from argparse import ArgumentParser

from .errors import GoException
from .kinds import DeclKind, TypeKind, parse_kinds
from .loader import Config


def _decl_kind_names():
    return ", ".join(kind.label() for kind in DeclKind if kind != DeclKind.ANY)


def add_inputs(config, inputs):
    """Request packages for the given directories and .go files.

    Each directory is a package named after it; loose files make up one
    package named "command-line-arguments".
    """
    filenames = []
    for item in inputs:
        if os.path.isdir(item):
            names = sorted(
                name
                for name in os.listdir(item)
                if name.endswith(".go") and not name.endswith("_test.go")
            )
            path = os.path.basename(os.path.abspath(item))
            config.create_from_filenames(
                path, *[os.path.join(item, name) for name in names]
            )
        else:
            filenames.append(item)
    if filenames:
        config.create_from_filenames("command-line-arguments", *filenames)


def main(argv=None):
    argparser = ArgumentParser(
        prog="gofacade", description="List the declarations of Go packages"
    )
    argparser.add_argument(
        "input", nargs="+", help="input .go files or package directories"
    )
    argparser.add_argument(
        "-I",
        "--root",
        action="append",
        default=[],
        help="source root to search for imported packages",
    )
    argparser.add_argument(
        "-k",
        "--decl-kind",
        action="append",
        default=[],
        help="declaration kind to list ({})".format(_decl_kind_names()),
    )
    argparser.add_argument(
        "-t",
        "--type-kind",
        action="append",
        default=[],
        help="type kind to list (like struct, func or int)",
    )
    argparser.add_argument(
        "-n", "--name", type=str, default="", help="name to list"
    )
    argparser.add_argument(
        "-p",
        "--preview",
        action="store_true",
        help="print the declarations instead of their kinds",
    )
    argparser.add_argument(
        "-c", "--config", type=str, default=None, help="JSON config file"
    )
    argparser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="enable progress (-v) or debug (-vv) output",
    )
    args = argparser.parse_args(argv)

    logging.basicConfig(format="%(levelname)s: %(message)s")
    if args.verbose == 1:
        logging.getLogger().setLevel(logging.INFO)
    elif args.verbose > 1:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        decl_kinds = parse_kinds(DeclKind, args.decl_kind)
        type_kinds = parse_kinds(TypeKind, args.type_kind)
    except ValueError as err:
        argparser.error(str(err))

    try:
        config = Config.from_json(args.config) if args.config else Config()
        config.source_roots.extend(args.root)
        add_inputs(config, args.input)
        prog = config.load()
    except (GoException, OSError, ValueError) as err:
        print("gofacade: {}".format(err), file=sys.stderr)
        return 1

    if not prog.initial_packages():
        print("gofacade: no packages loaded", file=sys.stderr)
        return 1
    for pkg in prog.initial_packages():
        for err in pkg.errors:
            print(err, file=sys.stderr)

    for facade in prog.lookup(decl_kinds, type_kinds, args.name):
        if args.preview:
            print(facade.preview())
            print()
        else:
            print(
                "{} {} {}".format(
                    facade,
                    facade.decl_kind().label(),
                    facade.type_kind().label(),
                )
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())
