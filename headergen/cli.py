"""Command-line driver.

Usage::

    headergen ffi.json --lib-name mylib -o include/
    python -m headergen ffi.json --dry-run
    headergen --list-langs

Reads a JSON declaration tree (see :mod:`headergen.loader`), generates
headers and writes them under the output directory.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from headergen.driver import Bindgen, write_outputs
from headergen.errors import BindgenError
from headergen.langs import get_default_lang, get_lang, get_lang_info, list_langs


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="headergen",
        description="Generate C headers from a library's FFI declarations.",
    )
    parser.add_argument("input", type=Path, nargs="?", help="JSON file describing the root FFI module")
    parser.add_argument("--list-langs", action="store_true", help="list the available target languages and exit")
    parser.add_argument(
        "--lang",
        choices=list_langs(),
        default=get_default_lang(),
        help="target language (default: %(default)s)",
    )
    parser.add_argument(
        "--lib-name",
        default="backend",
        help="name of the native library; names the root and aggregate headers (default: %(default)s)",
    )
    parser.add_argument(
        "--custom-code",
        type=Path,
        metavar="FILE",
        help="file of raw C placed verbatim at the top of the aggregate header",
    )
    parser.add_argument(
        "-o",
        "--output-dir",
        type=Path,
        default=Path("."),
        help="directory to write headers into (default: current directory)",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="print the names of the headers that would be written, and write nothing",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="log every skipped declaration")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _parser()
    args = parser.parse_args(argv)
    if args.list_langs:
        for info in get_lang_info():
            marker = " (default)" if info["is_default"] else ""
            print(f"{info['name']}: {info['description']}{marker}")
        return 0
    if args.input is None:
        parser.error("the following arguments are required: input")

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        custom_code = args.custom_code.read_text(encoding="utf-8") if args.custom_code else ""
        lang = get_lang(args.lang, lib_name=args.lib_name, custom_code=custom_code)
        outputs = Bindgen.from_json_file(args.input).compile(lang)
        if args.dry_run:
            for name in sorted(outputs):
                print(name)
        else:
            write_outputs(args.output_dir, outputs)
    except (BindgenError, ValueError, OSError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
