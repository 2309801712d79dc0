"""
normalization/dependencies.py
-----------------------------
Functional dependency theory: attribute closure, candidate keys,
minimal covers, projections and the tableau chase.

Everything here is pure and works on frozensets of attribute names.
"""

from itertools import combinations
from typing import Iterable, Sequence

from models.relation import FunctionalDependency, JoinDependency, MultivaluedDependency

FDs = Sequence[FunctionalDependency]


def closure(attrs: Iterable[str], fds: FDs) -> frozenset[str]:
    """
    Compute the closure X+ of an attribute set under a set of FDs.

    Args:
        attrs: The starting attribute set X.
        fds: Functional dependencies assumed to hold.

    Returns:
        Every attribute functionally determined by X (X included).
    """
    result = set(attrs)
    changed = True
    while changed:
        changed = False
        for fd in fds:
            if fd.lhs <= result and not fd.rhs <= result:
                result |= fd.rhs
                changed = True
    return frozenset(result)


def implies(fds: FDs, fd: FunctionalDependency) -> bool:
    """True if `fd` follows from `fds` (Armstrong's axioms)."""
    return fd.rhs <= closure(fd.lhs, fds)


def is_superkey(attrs: Iterable[str], all_attrs: Iterable[str], fds: FDs) -> bool:
    return closure(attrs, fds) >= frozenset(all_attrs)


def candidate_keys(all_attrs: Iterable[str], fds: FDs) -> list[frozenset[str]]:
    """
    Find every minimal key of a relation.

    Attributes that never appear on a right-hand side cannot be derived,
    so they belong to every key; the search only enumerates the rest.

    Returns:
        Keys ordered by size, then alphabetically.
    """
    universe = frozenset(all_attrs)
    derivable = frozenset().union(*(fd.rhs - fd.lhs for fd in fds)) & universe
    core = universe - derivable
    if closure(core, fds) >= universe:
        return [core]

    rest = sorted(universe - core)
    keys: list[frozenset[str]] = []
    for size in range(1, len(rest) + 1):
        for combo in combinations(rest, size):
            candidate = core | frozenset(combo)
            if any(key <= candidate for key in keys):
                continue
            if closure(candidate, fds) >= universe:
                keys.append(candidate)
    return sorted(keys, key=lambda k: (len(k), sorted(k)))


def prime_attributes(keys: Iterable[frozenset[str]]) -> frozenset[str]:
    """Attributes that belong to at least one candidate key."""
    return frozenset().union(*keys)


def minimal_cover(fds: FDs) -> list[FunctionalDependency]:
    """
    Canonical cover: singleton right-hand sides, no extraneous left-hand
    attribute, no redundant dependency. Input order is preserved.
    """
    split: list[FunctionalDependency] = []
    for fd in fds:
        for attr in sorted(fd.rhs - fd.lhs):
            dep = FunctionalDependency(fd.lhs, frozenset([attr]))
            if dep not in split:
                split.append(dep)

    reduced: list[FunctionalDependency] = []
    for fd in split:
        lhs = set(fd.lhs)
        for attr in sorted(fd.lhs):
            if len(lhs) > 1 and fd.rhs <= closure(lhs - {attr}, split):
                lhs.discard(attr)
        dep = FunctionalDependency(frozenset(lhs), fd.rhs)
        if dep not in reduced:
            reduced.append(dep)

    cover = list(reduced)
    for fd in reduced:
        others = [f for f in cover if f != fd]
        if implies(others, fd):
            cover = others
    return cover


def project_fds(fds: FDs, attrs: Iterable[str]) -> list[FunctionalDependency]:
    """
    Dependencies that hold on the projection of a relation onto `attrs`.

    Enumerates every subset of `attrs`, so it is only meant for the
    table-sized relations of a design exercise.
    """
    target = sorted(attrs)
    target_set = frozenset(target)
    projected: list[FunctionalDependency] = []
    for size in range(1, len(target)):
        for combo in combinations(target, size):
            lhs = frozenset(combo)
            rhs = (closure(lhs, fds) & target_set) - lhs
            if rhs:
                projected.append(FunctionalDependency(lhs, rhs))
    return minimal_cover(projected)


def determining_subset(key: Iterable[str], target: Iterable[str], fds: FDs) -> frozenset[str]:
    """
    Smallest part of `key` whose closure contains `target`.
    Falls back to the whole key.
    """
    key_attrs = sorted(key)
    wanted = frozenset(target)
    for size in range(1, len(key_attrs)):
        for combo in combinations(key_attrs, size):
            if wanted <= closure(combo, fds):
                return frozenset(combo)
    return frozenset(key_attrs)


def preserves_dependencies(fds: FDs, components: Sequence[Iterable[str]]) -> bool:
    """
    True if every FD can be checked inside the components without a join.

    Uses the polynomial test (no explicit projection): grow X through each
    component's local closure and check Y is reached.
    """
    parts = [frozenset(c) for c in components]
    for fd in fds:
        reached = set(fd.lhs)
        changed = True
        while changed:
            changed = False
            for part in parts:
                gained = (closure(reached & part, fds) & part) - reached
                if gained:
                    reached |= gained
                    changed = True
        if not fd.rhs <= reached:
            return False
    return True


def is_lossless(
    all_attrs: Iterable[str],
    components: Sequence[Iterable[str]],
    fds: FDs = (),
    mvds: Sequence[MultivaluedDependency] = (),
    jds: Sequence[JoinDependency] = (),
) -> bool:
    """
    Decide whether joining the projections onto `components` always gives
    back the original relation, using the tableau chase.

    Each component starts as one tableau row with distinguished symbols on
    its own attributes. FDs equate symbols; MVDs and JDs add the rows they
    force. The join is lossless iff some row becomes fully distinguished.

    The same test decides whether a join dependency ⋈{components} is
    implied by the dependencies.

    Only JDs spanning exactly `all_attrs` take part; an embedded JD would
    need fresh symbols outside its components.
    """
    attrs = sorted(all_attrs)
    universe = frozenset(attrs)
    index = {a: i for i, a in enumerate(attrs)}
    rows: set[tuple] = {
        tuple(("a", a) if a in frozenset(comp) else ("b", n, a) for a in attrs)
        for n, comp in enumerate(components)
    }
    applicable_fds = [fd for fd in fds if fd.lhs <= universe]
    applicable_mvds = [m for m in mvds if m.lhs <= universe]
    applicable_jds = [jd for jd in jds if jd.attributes == universe]

    def done() -> bool:
        return any(all(sym[0] == "a" for sym in row) for row in rows)

    changed = True
    while changed and not done():
        changed = False

        for fd in applicable_fds:
            lhs_idx = [index[a] for a in sorted(fd.lhs)]
            for attr in sorted((fd.rhs - fd.lhs) & universe):
                col = index[attr]
                while True:
                    groups: dict[tuple, set] = {}
                    for row in rows:
                        groups.setdefault(tuple(row[i] for i in lhs_idx), set()).add(row[col])
                    clash = next((s for s in groups.values() if len(s) > 1), None)
                    if clash is None:
                        break
                    # Distinguished symbols sort first, so min() keeps them
                    keep = min(clash)
                    rows = {
                        row[:col] + (keep,) + row[col + 1:] if row[col] in clash else row
                        for row in rows
                    }
                    changed = True

        for mvd in applicable_mvds:
            lhs_idx = [index[a] for a in sorted(mvd.lhs)]
            rhs_idx = {index[a] for a in (mvd.rhs - mvd.lhs) & universe}
            added = set()
            for t1 in rows:
                for t2 in rows:
                    if t1 == t2 or any(t1[i] != t2[i] for i in lhs_idx):
                        continue
                    swapped = tuple(
                        t1[i] if (i in rhs_idx or i in lhs_idx) else t2[i]
                        for i in range(len(attrs))
                    )
                    if swapped not in rows:
                        added.add(swapped)
            if added:
                rows |= added
                changed = True

        for jd in applicable_jds:
            added = {row for row in _join_rows(rows, jd, index) if row not in rows}
            if added:
                rows |= added
                changed = True

    return done()


def _join_rows(rows: set[tuple], jd: JoinDependency, index: dict[str, int]) -> set[tuple]:
    """
    Rows of the natural join of the tableau's projections onto the JD
    components: one row per choice of tableau rows (one per component)
    that agree on every shared attribute.
    """
    parts = [[index[a] for a in sorted(comp)] for comp in jd.components]
    width = len(index)
    joined: set[tuple] = set()

    def extend(n: int, partial: dict[int, tuple]) -> None:
        if n == len(parts):
            joined.add(tuple(partial[i] for i in range(width)))
            return
        for row in rows:
            if all(partial.get(i, row[i]) == row[i] for i in parts[n]):
                extend(n + 1, {**partial, **{i: row[i] for i in parts[n]}})

    extend(0, {})
    return joined
