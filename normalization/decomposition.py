"""
normalization/decomposition.py
------------------------------
Produces normalized replacement schemas for a relation design.

Pipeline used by `normalize()`:
    1. 1NF  - move every list-valued column, with its determinant, into
              its own relation.
    2. 3NF  - Bernstein synthesis from a minimal cover (covers 2NF too).
    3. BCNF - split fragments on FDs whose determinant is not a superkey.
    4. 4NF  - split fragments on non-trivial MVDs with a non-key LHS.
    5. 5NF  - split fragments on join dependencies not implied by keys.

Each step only decomposes, so the result is checked for a lossless join
and for dependency preservation at the end.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.relation import (
    NORMAL_FORMS,
    Attribute,
    FunctionalDependency,
    JoinDependency,
    MultivaluedDependency,
    RelationSchema,
    format_attrs,
)
from normalization.dependencies import (
    candidate_keys,
    closure,
    is_lossless,
    is_superkey,
    minimal_cover,
    preserves_dependencies,
    project_fds,
)
from utils.logger import get_logger

logger = get_logger(__name__)

TableNames = dict[frozenset[str], str]


@dataclass
class Decomposition:
    """
    Outcome of normalizing one relation.

    Attributes:
        source: The original relation.
        target: Requested normal form.
        relations: Replacement relations.
        lossless: Whether the natural join of the relations rebuilds the
            (1NF-flattened) original.
        preserves_dependencies: Whether every FD can be enforced inside a
            single relation.
        notes: Human-readable remarks on the steps taken.
    """
    source: RelationSchema
    target: str
    relations: list[RelationSchema]
    lossless: bool
    preserves_dependencies: bool
    notes: list[str] = field(default_factory=list)

    def relation_names(self) -> list[str]:
        return [r.name for r in self.relations]

    def find(self, name: str) -> Optional[RelationSchema]:
        return next((r for r in self.relations if r.name == name), None)


# ── FRAGMENTS ─────────────────────────────────────────────

def _name_for(attrs: frozenset[str], names: Optional[TableNames], fallback: str) -> str:
    if names and attrs in names:
        return names[attrs]
    return fallback


def _project_mvds(
    mvds: list[MultivaluedDependency], attrs: frozenset[str]
) -> list[MultivaluedDependency]:
    """Restrict MVDs whose LHS survives the projection (X →→ Y∩S holds on π_S)."""
    projected = []
    for mvd in mvds:
        if not mvd.lhs <= attrs:
            continue
        rhs = (mvd.rhs & attrs) - mvd.lhs
        dep = MultivaluedDependency(mvd.lhs, rhs)
        if rhs and not dep.is_trivial(attrs) and dep not in projected:
            projected.append(dep)
    return projected


def _project_jds(jds: list[JoinDependency], attrs: frozenset[str]) -> list[JoinDependency]:
    return [jd for jd in jds if jd.attributes == attrs]


def _fragment(
    source: RelationSchema,
    attrs: frozenset[str],
    names: Optional[TableNames],
    fallback: str,
) -> RelationSchema:
    """Project `source` onto `attrs`, carrying the dependencies that still hold."""
    fds = project_fds(source.fds, attrs)
    keys = candidate_keys(attrs, fds)
    return RelationSchema(
        name=_name_for(attrs, names, fallback),
        attributes=[a for a in source.attributes if a.name in attrs],
        primary_key=keys[0],
        fds=fds,
        mvds=_project_mvds(source.mvds, attrs),
        jds=_project_jds(source.jds, attrs),
        description=f"Proyección de {source.name} sobre ({format_attrs(attrs, source.attribute_names)})",
    )


def _drop_subsumed(components: list[frozenset[str]]) -> list[frozenset[str]]:
    kept: list[frozenset[str]] = []
    for comp in components:
        if any(comp <= other for other in kept):
            continue
        kept = [other for other in kept if not other < comp]
        kept.append(comp)
    return kept


# ── 1NF ───────────────────────────────────────────────────

def split_repeating_groups(
    schema: RelationSchema, names: Optional[TableNames] = None
) -> tuple[RelationSchema, list[RelationSchema]]:
    """
    Remove list-valued columns.

    Each non-atomic attribute A (element E) goes to a relation
    (determinant of A, E) keyed on all its columns; A is dropped from the
    main relation. The determinant is the smallest LHS of an FD that
    yields A, or the first candidate key when no FD mentions A.

    Returns:
        (main relation without list columns, one relation per list column)
    """
    groups: list[RelationSchema] = []
    removed: set[str] = set()
    cover = minimal_cover(schema.fds)

    for attr in schema.non_atomic():
        element = attr.element or attr.name
        sources = sorted(
            (fd.lhs for fd in cover if attr.name in fd.rhs),
            key=lambda lhs: (len(lhs), sorted(lhs)),
        )
        if sources:
            determinant = sources[0]
        else:
            determinant = candidate_keys(schema.attribute_set, cover)[0] - {attr.name}

        group_attrs = frozenset(determinant | {element})
        columns = [a for a in schema.attributes if a.name in determinant]
        columns.append(Attribute(element, attr.sql_type))
        groups.append(RelationSchema(
            name=_name_for(group_attrs, names, f"{schema.name}{element}"),
            attributes=columns,
            primary_key=group_attrs,
            description=f"Un registro por cada {element} de {format_attrs(determinant)}",
        ))
        removed.add(attr.name)
        logger.debug(f"1NF: moved {attr.name} of {schema.name} to ({format_attrs(group_attrs)})")

    if not removed:
        return schema, []

    fds = []
    for fd in schema.fds:
        if fd.lhs & removed:
            continue
        rhs = fd.rhs - removed
        if rhs:
            fds.append(FunctionalDependency(fd.lhs, rhs))
    kept = frozenset(a.name for a in schema.attributes if a.name not in removed)
    main = RelationSchema(
        name=schema.name,
        attributes=[a for a in schema.attributes if a.name not in removed],
        primary_key=schema.primary_key - removed if schema.primary_key else None,
        fds=fds,
        mvds=_project_mvds(schema.mvds, kept),
        jds=_project_jds(schema.jds, kept),
        description=schema.description,
    )
    return main, groups


# ── 3NF ───────────────────────────────────────────────────

def synthesize_3nf(
    schema: RelationSchema, names: Optional[TableNames] = None
) -> list[RelationSchema]:
    """
    Bernstein 3NF synthesis: one relation per determinant of the minimal
    cover, plus a key relation when no fragment holds a candidate key.
    Lossless and dependency preserving by construction.
    """
    attrs = schema.attribute_set
    cover = minimal_cover(schema.fds)
    by_lhs: dict[frozenset[str], set[str]] = {}
    for fd in cover:
        by_lhs.setdefault(fd.lhs, set(fd.lhs)).update(fd.rhs)

    components = [frozenset(group) for group in by_lhs.values()]
    keys = candidate_keys(attrs, cover)
    if not any(key <= comp for comp in components for key in keys):
        components.append(keys[0])
    components = _drop_subsumed(components)

    return [
        _fragment(schema, comp, names, f"{schema.name}_{n}")
        for n, comp in enumerate(components, start=1)
    ]


# ── BCNF / 4NF / 5NF ──────────────────────────────────────

def _bcnf_split(rel: RelationSchema) -> Optional[tuple[frozenset[str], frozenset[str]]]:
    attrs = rel.attribute_set
    for fd in minimal_cover(rel.fds):
        if fd.is_trivial() or is_superkey(fd.lhs, attrs, rel.fds):
            continue
        left = closure(fd.lhs, rel.fds) & attrs
        return left, (attrs - left) | fd.lhs
    return None


def _4nf_split(rel: RelationSchema) -> Optional[tuple[frozenset[str], frozenset[str]]]:
    attrs = rel.attribute_set
    for mvd in rel.mvds:
        if mvd.is_trivial(attrs) or is_superkey(mvd.lhs, attrs, rel.fds):
            continue
        return mvd.lhs | mvd.rhs, attrs - (mvd.rhs - mvd.lhs)
    return None


def _5nf_split(rel: RelationSchema) -> Optional[tuple[frozenset[str], ...]]:
    attrs = rel.attribute_set
    key_fds = [FunctionalDependency(k, attrs) for k in candidate_keys(attrs, rel.fds)]
    for jd in rel.jds:
        if jd.is_trivial(attrs) or is_lossless(attrs, jd.components, key_fds):
            continue
        return jd.components
    return None


def _decompose(
    schema: RelationSchema,
    splitter,
    names: Optional[TableNames],
) -> list[RelationSchema]:
    result: list[RelationSchema] = []
    pending = [schema]
    counter = 0
    while pending:
        rel = pending.pop(0)
        parts = splitter(rel)
        if parts is None:
            result.append(rel)
            continue
        fragments = []
        for attrs in parts:
            counter += 1
            fragments.append(_fragment(rel, frozenset(attrs), names, f"{rel.name}_{counter}"))
        logger.debug(f"Split {rel.name} into {[f.render() for f in fragments]}")
        pending[:0] = fragments
    return result


def decompose_bcnf(schema: RelationSchema, names: Optional[TableNames] = None) -> list[RelationSchema]:
    """Split on any FD whose determinant is not a superkey until none is left."""
    return _decompose(schema, _bcnf_split, names)


def decompose_4nf(schema: RelationSchema, names: Optional[TableNames] = None) -> list[RelationSchema]:
    """BCNF first, then split on MVD X →→ Y into (X ∪ Y) and (R − Y)."""
    def splitter(rel):
        return _bcnf_split(rel) or _4nf_split(rel)
    return _decompose(schema, splitter, names)


def decompose_5nf(schema: RelationSchema, names: Optional[TableNames] = None) -> list[RelationSchema]:
    """4NF first, then split along join dependencies the keys do not imply."""
    def splitter(rel):
        return _bcnf_split(rel) or _4nf_split(rel) or _5nf_split(rel)
    return _decompose(schema, splitter, names)


# ── PIPELINE ──────────────────────────────────────────────

def normalize(
    schema: RelationSchema, target: str = "3NF", names: Optional[TableNames] = None
) -> Decomposition:
    """
    Decompose a relation design up to the requested normal form.

    Args:
        schema: The denormalized relation.
        target: One of NORMAL_FORMS.
        names: Optional table names keyed by attribute set.

    Returns:
        A Decomposition with the replacement relations.

    Raises:
        ValueError: On an unknown target or a malformed schema.
    """
    if target not in NORMAL_FORMS:
        raise ValueError(f"Unknown normal form '{target}', expected one of {NORMAL_FORMS}")
    schema.validate()
    level = NORMAL_FORMS.index(target)
    notes: list[str] = []

    main, groups = split_repeating_groups(schema, names)
    for group in groups:
        notes.append(f"1NF: lista separada en {group.render()}")

    if level == 0:
        fragments = [main]
    else:
        fragments = synthesize_3nf(main, names)
        notes.append(f"3NF: síntesis en {len(fragments)} relación(es) a partir del recubrimiento mínimo")
        splitter = None
        if level >= NORMAL_FORMS.index("5NF"):
            splitter = decompose_5nf
        elif level >= NORMAL_FORMS.index("4NF"):
            splitter = decompose_4nf
        elif level >= NORMAL_FORMS.index("BCNF"):
            splitter = decompose_bcnf
        if splitter is not None:
            refined = []
            for fragment in fragments:
                refined.extend(splitter(fragment, names))
            if len(refined) != len(fragments):
                notes.append(f"{target}: {len(refined) - len(fragments)} división(es) adicional(es)")
            fragments = refined

    relations = fragments + groups
    components = _drop_subsumed([r.attribute_set for r in relations])
    relations = [r for r in relations if r.attribute_set in components]

    # The join is checked against the flattened original: list columns
    # become their element attribute and the determinant multidetermines it.
    flat_attrs = main.attribute_set | frozenset().union(*(g.attribute_set for g in groups))
    list_mvds = [
        MultivaluedDependency(g.attribute_set - {g.attributes[-1].name}, frozenset([g.attributes[-1].name]))
        for g in groups
    ]
    lossless = is_lossless(
        flat_attrs,
        [r.attribute_set for r in relations],
        main.fds,
        [*main.mvds, *list_mvds],
        main.jds,
    )
    preserving = preserves_dependencies(minimal_cover(main.fds), [r.attribute_set for r in relations])

    logger.info(
        f"Normalized {schema.name} to {target}: {[r.name for r in relations]} "
        f"(lossless={lossless}, preserving={preserving})"
    )
    return Decomposition(
        source=schema,
        target=target,
        relations=relations,
        lossless=lossless,
        preserves_dependencies=preserving,
        notes=notes,
    )
