"""Finalise accumulated headers: guards, includes and the aggregate header.

Runs once, after every declaration has been emitted. Dependency edges are
resolved only here, when every type's home header is known, so types may
be referenced before they are declared.
"""

from __future__ import annotations

import logging

import networkx as nx

from headergen.emit import HeaderState
from headergen.errors import BindgenError, CyclicDependencyError, Level
from headergen.routing import sanitise_id

logger = logging.getLogger(__name__)

STANDARD_INCLUDES = "#include <stdint.h>\n#include <stdbool.h>\n"


def wrap_extern(code: str) -> str:
    """Wrap a block of code with a C++-only ``extern "C"`` block."""
    return f'#ifdef __cplusplus\nextern "C" {{\n#endif\n\n{code}\n\n#ifdef __cplusplus\n}}\n#endif'


def wrap_guard(code: str, header_id: str) -> str:
    """Wrap a block of code with an include guard."""
    guard = f"bindgen_{sanitise_id(header_id)}"
    return f"#ifndef {guard}\n#define {guard}\n\n{code}\n\n#endif\n"


def build_dependency_graph(state: HeaderState) -> nx.DiGraph:
    """Build the include graph of ``state``.

    An edge ``A -> B`` means header ``B`` uses a type declared in ``A``,
    so ``A`` must be included first.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(sorted(state.outputs))

    for header in sorted(state.deps):
        if header not in state.outputs:
            continue
        for name in sorted(state.deps[header]):
            producer = state.decls.get(name)
            # Unknown names are external types; same-header types need no include.
            if producer is None or producer == header:
                continue
            graph.add_edge(producer, header)
    return graph


def include_order(graph: nx.DiGraph) -> list[str]:
    """Topologically sort headers, dependencies first.

    Ties are broken lexicographically so the order is reproducible.

    :raises CyclicDependencyError: If headers depend on each other.
    """
    try:
        return list(nx.lexicographical_topological_sort(graph))
    except nx.NetworkXUnfeasible:
        cycle = [(str(u), str(v)) for u, v in nx.find_cycle(graph)]
        raise CyclicDependencyError(cycle) from None


def finalise(state: HeaderState, custom_code: str = "") -> dict[str, str]:
    """Produce the final header set from ``state``.

    :param state: The run's accumulated state. Consumed: finalising it a
        second time is a bug.
    :param custom_code: Raw C placed verbatim at the top of the aggregate
        header.
    :returns: Mapping of header path to complete header text, including
        the aggregate ``<lib_name>.h``.
    :raises CyclicDependencyError: If the include graph has a cycle. No
        headers are produced in that case.
    """
    if state.finalised:
        raise BindgenError("header state already finalised", Level.BUG)
    state.finalised = True

    aggregate = f"{state.lib_name}.h"
    if aggregate in state.outputs:
        raise BindgenError(f"module header `{aggregate}` collides with the aggregate header")
    check_guards(state)

    order = include_order(build_dependency_graph(state))
    logger.debug("include order: %s", order)

    outputs: dict[str, str] = {}
    for header in sorted(state.outputs):
        body = f"{STANDARD_INCLUDES}\n{wrap_extern(state.outputs[header].rstrip())}"
        outputs[header] = wrap_guard(body, header)

    top_level = [f"{custom_code}\n"] if custom_code else []
    top_level.extend(f'#include "{header}"\n' for header in order)
    outputs[aggregate] = wrap_guard("".join(top_level).rstrip("\n"), f"{state.lib_name}_root")
    return outputs


def check_guards(state: HeaderState) -> None:
    """Reject headers whose include guards would coincide.

    Sanitising drops separators, so ``a/b.h`` and ``ab.h`` share a guard
    and the second one included would be silently empty.

    :raises BindgenError: If two headers, or a header and the aggregate
        header, map to the same guard.
    """
    seen = {sanitise_id(f"{state.lib_name}_root"): f"{state.lib_name}.h"}
    for header in sorted(state.outputs):
        guard = sanitise_id(header)
        if guard in seen:
            raise BindgenError(
                f"headers `{seen[guard]}` and `{header}` share the include guard `bindgen_{guard}`"
            )
        seen[guard] = header
