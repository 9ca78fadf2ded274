"""Command line front end for kepgen.

Every command works on a hierarchy JSON file. Edit commands load the file
(or start from an empty root when it does not exist yet), apply one change
and save it back; nothing is written when the change fails.

Nodes are addressed by their path below the root, joined with "/"
(e.g. "Line1/Motor/Speed"); an empty path means the root folder.
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from kepgen import __version__
from kepgen.config.constants import (
    DEFAULT_CSV_FILENAME,
    DEFAULT_JSON_FILENAME,
    DEFAULT_LOG_LEVEL,
    LOG_LEVEL_ENV,
)
from kepgen.controllers import AddressAllocator, AppController
from kepgen.errors import KepGenError
from kepgen.models import FolderNode, TagDataType

logger = logging.getLogger(__name__)

DATA_TYPE_CHOICES = [t.value for t in TagDataType]


def _open_session(filepath: str, create: bool = False) -> AppController:
    controller = AppController()
    if os.path.exists(filepath):
        controller.load_hierarchy(filepath)
    elif not create:
        raise FileNotFoundError(f"No such hierarchy file: {filepath}")
    return controller


def _container(controller: AppController, path: str) -> int:
    h = controller.hierarchy
    return h.container_for(h.find(path))


def cmd_init(args) -> int:
    if os.path.exists(args.file) and not args.force:
        print(f"{args.file} already exists (use --force to overwrite)", file=sys.stderr)
        return 1
    AppController().save_hierarchy(args.file)
    print(f"Created {args.file}")
    return 0


def cmd_add_folder(args) -> int:
    controller = _open_session(args.file, create=True)
    controller.add_folder(_container(controller, args.parent), args.name)
    controller.save_hierarchy(args.file)
    return 0


def cmd_add_tag(args) -> int:
    controller = _open_session(args.file, create=True)
    controller.add_tag(_container(controller, args.parent), args.name, args.type)
    controller.save_hierarchy(args.file)
    return 0


def cmd_rename(args) -> int:
    controller = _open_session(args.file)
    controller.rename(controller.hierarchy.find(args.path), args.new_name)
    controller.save_hierarchy(args.file)
    return 0


def cmd_remove(args) -> int:
    controller = _open_session(args.file)
    controller.remove(controller.hierarchy.find(args.path))
    controller.save_hierarchy(args.file)
    return 0


def cmd_duplicate(args) -> int:
    controller = _open_session(args.file)
    new_id = controller.duplicate(controller.hierarchy.find(args.path))
    controller.save_hierarchy(args.file)
    print(controller.hierarchy.get(new_id).name)
    return 0


def cmd_move(args) -> int:
    controller = _open_session(args.file)
    h = controller.hierarchy
    node_id = h.find(args.path)
    target_id = h.drop_target_for(h.find(args.new_parent))
    if not controller.move(node_id, target_id):
        print(f"Cannot move '{args.path}' into itself or one of its descendants", file=sys.stderr)
        return 1
    controller.save_hierarchy(args.file)
    return 0


def cmd_show(args) -> int:
    h = _open_session(args.file).hierarchy
    for depth, node in h.iter_preorder():
        if isinstance(node, FolderNode):
            label = f"{node.name}/"
        else:
            label = f"{node.name} [{node.data_type.value}]"
        print(f"{'  ' * depth}{label}")
    return 0


def cmd_tags(args) -> int:
    controller = _open_session(args.file)
    for record, address in AddressAllocator().allocate(controller.tags()):
        print(f"{record.full_name}\t{address}\t{record.data_type.csv_name}")
    return 0


def cmd_export(args) -> int:
    controller = _open_session(args.file)
    path = controller.export_csv(args.output)
    print(f"CSV exported to {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="kepgen",
        description="Kepware CSV Generator - arrange folders/tags, then export Kepware CSV",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--log-level",
        default=os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL),
        help=f"logging level (default: ${LOG_LEVEL_ENV} or {DEFAULT_LOG_LEVEL})",
    )
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    p = sub.add_parser("init", help="create an empty hierarchy file")
    p.add_argument("file", nargs="?", default=DEFAULT_JSON_FILENAME)
    p.add_argument("--force", action="store_true", help="overwrite an existing file")
    p.set_defaults(func=cmd_init)

    p = sub.add_parser("add-folder", help="add a folder")
    p.add_argument("file")
    p.add_argument("parent", help="parent path ('' for the root; a tag means its folder)")
    p.add_argument("name")
    p.set_defaults(func=cmd_add_folder)

    p = sub.add_parser("add-tag", help="add a tag")
    p.add_argument("file")
    p.add_argument("parent", help="parent path ('' for the root; a tag means its folder)")
    p.add_argument("name")
    p.add_argument("--type", "-t", default=TagDataType.STRING.value, type=str.capitalize,
                   choices=DATA_TYPE_CHOICES)
    p.set_defaults(func=cmd_add_tag)

    p = sub.add_parser("rename", help="rename a folder or tag")
    p.add_argument("file")
    p.add_argument("path")
    p.add_argument("new_name")
    p.set_defaults(func=cmd_rename)

    p = sub.add_parser("remove", help="remove a folder or tag with everything below it")
    p.add_argument("file")
    p.add_argument("path")
    p.set_defaults(func=cmd_remove)

    p = sub.add_parser("duplicate", help="copy a folder next to itself")
    p.add_argument("file")
    p.add_argument("path")
    p.set_defaults(func=cmd_duplicate)

    p = sub.add_parser("move", help="move a node into another folder")
    p.add_argument("file")
    p.add_argument("path")
    p.add_argument("new_parent", help="target path (a tag means its folder)")
    p.set_defaults(func=cmd_move)

    p = sub.add_parser("show", help="print the hierarchy")
    p.add_argument("file")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("tags", help="print flattened tags with addresses")
    p.add_argument("file")
    p.set_defaults(func=cmd_tags)

    p = sub.add_parser("export", help="write the Kepware CSV")
    p.add_argument("file")
    p.add_argument("-o", "--output", default=None, help=f"CSV file or directory (default: {DEFAULT_CSV_FILENAME})")
    p.set_defaults(func=cmd_export)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = getattr(logging, str(args.log_level).upper(), None)
    if not isinstance(level, int):
        parser.error(f"unknown log level: {args.log_level}")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        return args.func(args)
    except (KepGenError, OSError) as e:
        logger.debug("Command failed", exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
