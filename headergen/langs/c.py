"""C header generation.

Each module of the library gets its own header; ``<lib_name>.h`` includes
them all in dependency order.
"""

from __future__ import annotations

from collections.abc import Sequence

from headergen.assemble import finalise
from headergen.emit import HeaderState, Outcome, emit
from headergen.errors import BindgenError, Level
from headergen.ir import Declaration


class LangC:
    """Writer of C headers for a library's FFI surface.

    Options
    -------
    lib_name : str
        Name of the native library. The root ``ffi`` module is written to
        ``<lib_name>/<lib_name>.h`` and the aggregate header to
        ``<lib_name>.h``. Defaults to ``"backend"``.
    custom_code : str
        Raw C placed at the top of the aggregate header, for declarations
        the translator cannot produce (opaque pointer typedefs, say).

    Example
    -------
    ::

        lang = LangC(lib_name="mylib")
        lang.emit(item, ["ffi", "ipc"])
        outputs = lang.finalise()
    """

    def __init__(self, lib_name: str = "backend", custom_code: str = "") -> None:
        self._state = HeaderState(lib_name=lib_name)
        self._custom_code = custom_code

    @property
    def lib_name(self) -> str:
        return self._state.lib_name

    @property
    def custom_code(self) -> str:
        return self._custom_code

    def set_lib_name(self, name: str) -> None:
        """Set the name of the native library. Must precede any emission."""
        if self._state.outputs:
            raise BindgenError("library name changed after declarations were emitted", Level.BUG)
        self._state.lib_name = name

    def add_custom_code(self, code: str) -> None:
        """Append raw C to the top of the aggregate header."""
        self._custom_code += code

    def emit(self, item: Declaration, module: Sequence[str]) -> Outcome:
        return emit(self._state, item, module)

    def finalise(self) -> dict[str, str]:
        return finalise(self._state, self._custom_code)

    @property
    def name(self) -> str:
        return "c"

    @property
    def format_description(self) -> str:
        return "C headers"


# Bottom-of-module self-registration; see headergen/langs/__init__.py.
from headergen.langs import register_lang  # noqa: E402

register_lang(
    "c",
    LangC,
    is_default=True,
    description="C headers",
)
