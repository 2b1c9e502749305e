"""Map modules to header paths and header paths to guard identifiers."""

from __future__ import annotations

import os
import re
from collections.abc import Sequence

from headergen.errors import BindgenError, Level

# Name of a library's root FFI module.
ROOT_MODULE = "ffi"

_NON_IDENT_RE = re.compile(r"[^A-Za-z0-9_]")


def header_path(module: Sequence[str], lib_name: str) -> str:
    """Transform a module path into a header path.

    The root module is renamed after the library and gets its own
    directory, so ``["ffi"]`` maps to ``<lib>/<lib>.h`` and never collides
    with the aggregate ``<lib>.h``.
    """
    if not module:
        raise BindgenError("empty module path", Level.BUG)

    segments = list(module)
    if segments[0] == ROOT_MODULE:
        segments[0] = lib_name
        if len(segments) == 1:
            segments.append(lib_name)

    return os.sep.join(segments) + ".h"


def sanitise_id(header: str) -> str:
    """Remove everything but ``[A-Za-z0-9_]`` from a header name.

    The result is always appended to ``bindgen_``, so it may start with
    a digit.
    """
    return _NON_IDENT_RE.sub("", header)
