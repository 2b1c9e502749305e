"""Predicates and scanners over declaration attributes."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from headergen.ir import Attribute


def check_no_mangle(attr: Attribute) -> bool:
    """Check the attribute is ``#[no_mangle]``."""
    return attr.kind == "word" and attr.name == "no_mangle"


def check_repr_c(attr: Attribute) -> bool:
    """Check the attribute is exactly ``#[repr(C)]``.

    ``#[repr(C, packed)]`` and ``#[repr(C(...))]`` do not qualify: the
    generated header cannot express the extra layout constraint.
    """
    if attr.kind != "list" or attr.name != "repr" or len(attr.items) != 1:
        return False
    item = attr.items[0]
    return item.kind == "word" and item.name == "C"


def doc_fragment(attr: Attribute, indent: str = "") -> str | None:
    """Return the doc comment carried by ``attr`` as an indented line.

    Doc attribute values omit the trailing newline, so one is added.
    """
    if attr.kind == "name_value" and attr.name == "doc" and attr.value is not None:
        return f"{indent}{attr.value}\n"
    return None


def scan(
    attrs: Sequence[Attribute],
    check: Callable[[Attribute], bool],
    retrieve: Callable[[Attribute], str | None],
) -> tuple[bool, str]:
    """Fold over ``attrs`` once.

    Returns whether any attribute passed ``check`` and the concatenation of
    everything ``retrieve`` extracted, in encounter order.
    """
    passed = False
    retrieved: list[str] = []
    for attr in attrs:
        if not passed:
            passed = check(attr)
        text = retrieve(attr)
        if text is not None:
            retrieved.append(text)
    return passed, "".join(retrieved)


def has_stable_linkage(attrs: Sequence[Attribute]) -> bool:
    return any(check_no_mangle(a) for a in attrs)


def has_c_layout(attrs: Sequence[Attribute]) -> bool:
    return any(check_repr_c(a) for a in attrs)


def docs(attrs: Sequence[Attribute], indent: str = "") -> str:
    """All doc comments of ``attrs``, one indented line each."""
    _, text = scan(attrs, lambda _: True, lambda a: doc_fragment(a, indent))
    return text
