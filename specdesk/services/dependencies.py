"""Dependency resolution and graph construction over loaded specs."""
from __future__ import annotations

from specdesk.constants import DEFAULT_PRIORITY, DEPENDS_ON_EDGE
from specdesk.models import (
    DependencyEdge,
    DependencyGraph,
    DependencyInfo,
    DependencyNode,
    Spec,
    SpecDependencies,
)
from specdesk.parsers.specs import reference_number


def _name_aliases(spec: Spec) -> list[str]:
    """Keys a spec answers to: its name, zero-padded number and bare number."""
    aliases = [spec.specName]
    if spec.specNumber is not None:
        aliases.append(f"{spec.specNumber:03d}")
        aliases.append(str(spec.specNumber))
    return aliases


def resolve_dependency(
    dep: str,
    by_name: dict[str, str],
    by_number: dict[int, str],
) -> str | None:
    """Resolve a raw reference to a spec id, or ``None`` when unknown."""
    trimmed = dep.strip()

    if trimmed in by_name:
        return by_name[trimmed]

    number = reference_number(trimmed)
    if number is not None:
        return by_number.get(number)

    return None


def build_indexes(specs: list[Spec]) -> tuple[dict[str, str], dict[int, str]]:
    """Name/alias → id and number → id indexes over numbered specs."""
    by_name: dict[str, str] = {}
    by_number: dict[int, str] = {}
    for spec in specs:
        if spec.specNumber is None:
            continue
        by_number[spec.specNumber] = spec.id
        for alias in _name_aliases(spec):
            by_name[alias] = spec.id
    return by_name, by_number


def build_dependency_graph(specs: list[Spec]) -> DependencyGraph:
    """Build the directed dependency graph of numbered specs.

    Edges run from the spec depended upon to the dependent spec, so
    "A depends on B" becomes ``B -> A``.
    """
    numbered = [spec for spec in specs if spec.specNumber is not None]
    by_name, by_number = build_indexes(numbered)

    nodes = [
        DependencyNode(
            id=spec.id,
            name=spec.title or f"Spec {spec.specNumber}",
            number=spec.specNumber,
            status=spec.status,
            priority=spec.priority or DEFAULT_PRIORITY,
            tags=list(spec.tags),
        )
        for spec in numbered
    ]

    edges: list[DependencyEdge] = []
    for spec in numbered:
        for dep in spec.dependsOn:
            target_id = resolve_dependency(dep, by_name, by_number)
            if target_id is None or target_id == spec.id:
                continue
            edges.append(DependencyEdge(source=target_id, target=spec.id, type=DEPENDS_ON_EDGE))

    return DependencyGraph(nodes=nodes, edges=edges)


def _info(spec: Spec) -> DependencyInfo:
    return DependencyInfo(specName=spec.specName, title=spec.title, status=spec.status)


def get_spec_dependencies(spec: Spec, all_specs: list[Spec]) -> SpecDependencies:
    """Rich dependency view of one spec for display.

    References that do not resolve are dropped; ``requiredBy`` entries are
    taken from the loader's reverse links.
    """
    spec_map: dict[str, Spec] = {}
    for candidate in all_specs:
        for alias in _name_aliases(candidate):
            spec_map[alias] = candidate

    depends_on: list[DependencyInfo] = []
    for dep in spec.dependsOn:
        trimmed = dep.strip()
        target = spec_map.get(trimmed)
        if target is None:
            number = reference_number(trimmed)
            if number is not None:
                target = spec_map.get(str(number))
        if target is not None:
            depends_on.append(_info(target))

    required_by = [_info(spec_map[name]) for name in spec.requiredBy if name in spec_map]

    return SpecDependencies(dependsOn=depends_on, requiredBy=required_by)
