"""Unit tests for attribute closure, keys, covers and the chase."""

from models.relation import (
    FunctionalDependency as FD,
    JoinDependency as JD,
    MultivaluedDependency as MVD,
)
from normalization.dependencies import (
    candidate_keys,
    closure,
    determining_subset,
    implies,
    is_lossless,
    is_superkey,
    minimal_cover,
    preserves_dependencies,
    prime_attributes,
    project_fds,
)

ABC = frozenset("ABC")


def test_closure_follows_chains():
    fds = [FD.of("A", "B"), FD.of("B", "C")]
    assert closure(["A"], fds) == ABC
    assert closure(["B"], fds) == frozenset("BC")
    assert closure(["C"], fds) == frozenset("C")


def test_implies_and_superkey():
    fds = [FD.of("A", "B"), FD.of("B", "C")]
    assert implies(fds, FD.of("A", "C"))
    assert not implies(fds, FD.of("C", "A"))
    assert is_superkey("A", ABC, fds)
    assert is_superkey(["A", "C"], ABC, fds)
    assert not is_superkey("B", ABC, fds)


def test_candidate_keys_include_attributes_never_derived():
    fds = [FD.of("A", "B")]
    assert candidate_keys(ABC, fds) == [frozenset("AC")]


def test_candidate_keys_finds_every_minimal_key():
    # AB -> C, C -> A: keys AB and BC
    fds = [FD.of(["A", "B"], "C"), FD.of("C", "A")]
    keys = candidate_keys(ABC, fds)
    assert keys == [frozenset("AB"), frozenset("BC")]
    assert prime_attributes(keys) == ABC


def test_candidate_keys_without_fds_is_all_attributes():
    assert candidate_keys(ABC, []) == [ABC]


def test_minimal_cover_removes_redundancy_and_extraneous_attributes():
    fds = [
        FD.of("A", ["B", "C"]),
        FD.of("B", "C"),
        FD.of(["A", "B"], "C"),
    ]
    cover = minimal_cover(fds)
    assert cover == [FD.of("A", "B"), FD.of("B", "C")]


def test_project_fds_keeps_transitive_dependency():
    fds = [FD.of("A", "B"), FD.of("B", "C")]
    assert project_fds(fds, "AC") == [FD.of("A", "C")]


def test_determining_subset_picks_smallest_key_part():
    fds = [FD.of("A", "X"), FD.of("X", "Y")]
    assert determining_subset(["A", "B"], ["X"], fds) == frozenset("A")
    assert determining_subset(["A", "B"], ["Z"], fds) == frozenset("AB")


def test_preserves_dependencies():
    fds = [FD.of("A", "B"), FD.of("B", "C")]
    assert preserves_dependencies(fds, ["AB", "BC"])
    assert not preserves_dependencies(fds, ["AB", "AC"])


def test_is_lossless_with_fds():
    fds = [FD.of("A", "B")]
    assert is_lossless(ABC, ["AB", "AC"], fds)
    assert not is_lossless(ABC, ["AB", "BC"], fds)


def test_is_lossless_with_mvds():
    attrs = frozenset(["K", "P", "C"])
    mvds = [MVD.of("K", "P")]
    assert is_lossless(attrs, [["K", "P"], ["K", "C"]], mvds=mvds)
    assert not is_lossless(attrs, [["K", "P"], ["K", "C"]])


def test_is_lossless_with_join_dependency():
    jd = JD.of(["A", "B"], ["B", "C"], ["A", "C"])
    components = [["A", "B"], ["B", "C"], ["A", "C"]]
    assert is_lossless(ABC, components, jds=[jd])
    assert not is_lossless(ABC, components)
    # Any two of the three components are still lossy under the JD
    assert not is_lossless(ABC, [["A", "B"], ["B", "C"]], jds=[jd])
