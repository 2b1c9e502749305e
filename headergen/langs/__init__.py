"""Target languages that headers can be generated for.

A target language consumes declarations one at a time, in module order,
and produces its output files once at the end.

Available Languages
-------------------
c
    C headers with include guards, ``extern "C"`` blocks and an aggregate
    top-level header.

Example
-------
::

    from headergen.langs import get_lang

    lang = get_lang("c", lib_name="mylib")
    for item in declarations:
        lang.emit(item, ["ffi"])
    outputs = lang.finalise()
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from headergen.emit import Outcome
from headergen.ir import Declaration

__all__ = [
    "Lang",
    "get_default_lang",
    "get_lang",
    "get_lang_info",
    "is_lang_available",
    "list_langs",
    "register_lang",
]

# =============================================================================
# Lang Protocol
# =============================================================================


@runtime_checkable
class Lang(Protocol):
    """Protocol defining the interface of a target language.

    Language options (e.g. ``lib_name`` for C) are constructor parameters
    on the concrete class, not part of :meth:`emit`.
    """

    def emit(self, item: Declaration, module: Sequence[str]) -> Outcome:
        """Translate one declaration of ``module``.

        :returns: Whether the declaration was emitted or skipped as not
            exported.
        :raises ~headergen.errors.BindgenError: If the declaration is
            exported but cannot be represented.
        """
        ...

    def finalise(self) -> dict[str, str]:
        """Produce every output file, keyed by relative path."""
        ...

    @property
    def name(self) -> str:
        """Name of this language (e.g., ``"c"``)."""
        ...

    @property
    def format_description(self) -> str:
        """Short description of the output format."""
        ...


# =============================================================================
# Lang Registry
# =============================================================================

_LANG_REGISTRY: dict[str, type[Lang]] = {}
_LANG_DESCRIPTIONS: dict[str, str] = {}
_DEFAULT_LANG: str | None = None
_LANGS_LOADED: bool = False


def register_lang(
    name: str,
    lang_class: type[Lang],
    is_default: bool = False,
    description: str | None = None,
) -> None:
    """Register a target language.

    Called by language modules during import to self-register. The first
    registered language becomes the default unless ``is_default`` is set
    on a later registration.

    :param name: Language name used in :func:`get_lang` lookups.
    :param lang_class: The class implementing :class:`Lang`.
    :param is_default: If True, this language becomes the default.
    :param description: Optional short description for :func:`get_lang_info`.
        Falls back to the first line of the class docstring.
    """
    global _DEFAULT_LANG  # pylint: disable=global-statement
    if name in _LANG_REGISTRY:
        raise ValueError(f"Language already registered: {name!r}")
    _LANG_REGISTRY[name] = lang_class
    if description is not None:
        _LANG_DESCRIPTIONS[name] = description
    elif lang_class.__doc__:
        _LANG_DESCRIPTIONS[name] = lang_class.__doc__.strip().split("\n")[0]
    if is_default or _DEFAULT_LANG is None:
        _DEFAULT_LANG = name


def list_langs() -> list[str]:
    """List names of all registered languages."""
    _ensure_langs_loaded()
    return list(_LANG_REGISTRY.keys())


def is_lang_available(name: str) -> bool:
    _ensure_langs_loaded()
    return name in _LANG_REGISTRY


def get_lang_info() -> list[dict[str, str | bool]]:
    """Get information about all registered languages.

    :returns: List of dicts with keys: name, description, is_default.
    """
    _ensure_langs_loaded()
    return [
        {
            "name": name,
            "description": _LANG_DESCRIPTIONS.get(name, ""),
            "is_default": name == _DEFAULT_LANG,
        }
        for name in _LANG_REGISTRY
    ]


def get_lang(name: str | None = None, **kwargs: object) -> Lang:
    """Get a fresh language instance.

    Keyword arguments are forwarded to the language constructor::

        lang = get_lang("c", lib_name="mylib", custom_code="typedef void* Handle;")

    :param name: Language name, or None for the default language.
    :raises ValueError: If the requested language is not available.
    """
    _ensure_langs_loaded()
    if name is None:
        name = get_default_lang()
    if not is_lang_available(name):
        available = ", ".join(_LANG_REGISTRY.keys()) or "(none)"
        raise ValueError(f"Unknown language: {name!r}. Available: {available}")
    return _LANG_REGISTRY[name](**kwargs)


def get_default_lang() -> str:
    """Get the name of the default language.

    :raises ValueError: If no languages are available.
    """
    _ensure_langs_loaded()
    if _DEFAULT_LANG is None:
        raise ValueError("No languages available")
    return _DEFAULT_LANG


def _ensure_langs_loaded() -> None:
    """Lazily import language modules to populate the registry.

    Language modules import :func:`register_lang` from here at load time,
    and this function imports them, so the import must stay lazy.
    """
    global _LANGS_LOADED  # pylint: disable=global-statement

    if _LANGS_LOADED:
        return

    _LANGS_LOADED = True

    # Import triggers module-level registration
    import headergen.langs.c  # noqa: F401
