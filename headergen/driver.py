"""Walk a module tree through a target language and write the results."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from headergen.ir import Declaration, Module
from headergen.langs import Lang
from headergen.loader import load_module

logger = logging.getLogger(__name__)


class Bindgen:
    """Generate bindings for the module tree rooted at ``root``.

    Example
    -------
    ::

        from headergen import Bindgen, get_lang, write_outputs

        bindgen = Bindgen.from_json_file("ffi.json")
        outputs = bindgen.compile(get_lang("c", lib_name="mylib"))
        write_outputs("include", outputs)
    """

    def __init__(self, root: Module) -> None:
        self.root = root

    @classmethod
    def from_json_file(cls, path: str | Path) -> Bindgen:
        return cls(load_module(path))

    def declarations(self) -> Iterator[tuple[list[str], Declaration]]:
        """Yield ``(module_path, declaration)`` for every public item, in source order."""
        yield from _walk(self.root, [self.root.name])

    def compile(self, lang: Lang, finalise: bool = True) -> dict[str, str]:
        """Feed every declaration to ``lang``.

        :param finalise: Whether to finish the run and return the output
            files. With False, ``lang`` is left open for more modules and
            an empty mapping is returned.
        """
        for module, item in self.declarations():
            lang.emit(item, module)
        if not finalise:
            return {}
        return lang.finalise()


def _walk(module: Module, path: list[str]) -> Iterator[tuple[list[str], Declaration]]:
    for item in module.items:
        if isinstance(item, Module):
            yield from _walk(item, path + [item.name])
        elif not item.public:
            logger.debug("skipping private item %s in %s", item.name, "::".join(path))
        else:
            yield path, item


def write_outputs(root: str | Path, outputs: dict[str, str]) -> list[Path]:
    """Write each output file under ``root``, creating directories as needed.

    :returns: The written paths, in sorted order.
    """
    root = Path(root)
    written = []
    for name in sorted(outputs):
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(outputs[name], encoding="utf-8")
        logger.info("wrote %s", path)
        written.append(path)
    return written
