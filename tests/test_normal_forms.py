"""Normal-form analysis of the three worked cases and of small schemas."""

import pytest

from models.relation import (
    Attribute,
    FunctionalDependency as FD,
    JoinDependency as JD,
    RelationSchema,
    attr_set,
)
from normalization.cases import get_case
from normalization.normal_forms import analyze


def _schema(names, fds=(), mvds=(), jds=(), pk=None):
    return RelationSchema(
        name="R",
        attributes=[Attribute(n) for n in names],
        primary_key=attr_set(pk) if pk else None,
        fds=list(fds),
        mvds=list(mvds),
        jds=list(jds),
    )


def test_artista_cancion_violates_1nf_2nf_and_3nf():
    report = analyze(get_case("1").schema)

    assert report.keys == [attr_set(["IdInterprete", "IdCancion"])]
    assert report.direct_violations() == ["1NF", "2NF", "3NF"]
    assert report.highest_normal_form == "0NF"
    assert report.violated_forms() == ["1NF", "2NF", "3NF", "BCNF", "4NF", "5NF"]

    assert [v.dependency for v in report.violations_for("1NF")] == ["Idiomas"]
    assert [v.dependency for v in report.violations_for("2NF")] == [
        "IdInterprete → NombreInterprete, IdPais, Pais",
        "IdCancion → TituloCancion, Idiomas, Ritmo",
    ]
    assert [v.dependency for v in report.violations_for("3NF")] == [
        "IdInterprete → IdPais → Pais",
    ]
    assert report.key_findings == []


def test_grabacion_key_findings():
    report = analyze(get_case("2").schema)

    assert report.keys == [attr_set(["IdInterpretacion", "IdAlbum"])]
    assert [f.kind for f in report.key_findings] == ["not_minimal", "identity_in_composite"]
    assert "IdFormato sobra" in report.key_findings[0].detail
    assert report.violations == []
    assert report.highest_normal_form == "5NF"


def test_campana_promocion_violates_4nf_only():
    report = analyze(get_case("3").schema)

    assert report.direct_violations() == ["4NF"]
    assert len(report.violations_for("4NF")) == 2
    assert report.highest_normal_form == "BCNF"
    assert report.satisfies("BCNF")
    assert not report.satisfies("4NF")


def test_partial_dependencies_on_every_candidate_key():
    # Keys ABC and DEF; G hangs off a part of each one
    fds = [
        FD.of(["A", "B", "C"], ["D", "E", "F", "G"]),
        FD.of(["D", "E", "F"], ["A", "B", "C"]),
        FD.of(["A", "B"], "G"),
        FD.of("D", "G"),
    ]
    report = analyze(_schema("ABCDEFG", fds=fds))

    assert report.keys == [frozenset("ABC"), frozenset("DEF")]
    assert [v.dependency for v in report.violations_for("2NF")] == ["A, B → G", "D → G"]
    assert report.violations_for("3NF") == []


def test_bcnf_violation_on_prime_dependent():
    # AB -> C, C -> A: 3NF (A is prime) but not BCNF
    report = analyze(_schema("ABC", fds=[FD.of(["A", "B"], "C"), FD.of("C", "A")]))
    assert report.direct_violations() == ["BCNF"]
    assert report.highest_normal_form == "3NF"


def test_declared_key_that_is_not_a_superkey():
    report = analyze(_schema("ABC", fds=[FD.of("A", "B")], pk="A"))
    assert [f.kind for f in report.key_findings] == ["not_superkey"]


def test_join_dependency_not_implied_by_keys_violates_5nf():
    jd = JD.of(["A", "B"], ["B", "C"], ["A", "C"])
    report = analyze(_schema("ABC", jds=[jd]))
    assert report.direct_violations() == ["5NF"]
    assert report.highest_normal_form == "4NF"


def test_unknown_attribute_in_dependency_is_rejected():
    with pytest.raises(ValueError):
        analyze(_schema("AB", fds=[FD.of("A", "Z")]))
