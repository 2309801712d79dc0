"""Decomposition of the worked cases into replacement relations."""

import pytest

from models.relation import (
    Attribute,
    FunctionalDependency as FD,
    JoinDependency as JD,
    RelationSchema,
)
from normalization.cases import get_case
from normalization.decomposition import (
    decompose_4nf,
    decompose_5nf,
    normalize,
    split_repeating_groups,
    synthesize_3nf,
)


def test_split_repeating_groups_moves_languages_out():
    case = get_case("1")
    main, groups = split_repeating_groups(case.schema, case.names)

    assert "Idiomas" not in main.attribute_names
    assert [g.name for g in groups] == ["CancionIdioma"]
    assert groups[0].attribute_names == ["IdCancion", "Idioma"]
    assert groups[0].primary_key == frozenset(["IdCancion", "Idioma"])


def test_split_repeating_groups_without_lists_is_a_no_op():
    schema = get_case("3").schema
    main, groups = split_repeating_groups(schema)
    assert main is schema
    assert groups == []


def test_artista_cancion_to_3nf():
    case = get_case("1")
    result = normalize(case.schema, "3NF", case.names)

    assert result.relation_names() == [
        "Interprete",
        "Pais",
        "Cancion",
        "InterpreteCancion",
        "CancionIdioma",
    ]
    assert result.lossless
    assert result.preserves_dependencies
    assert result.find("Pais").attribute_names == ["IdPais", "Pais"]
    assert result.find("InterpreteCancion").primary_key == frozenset(["IdInterprete", "IdCancion"])


def test_grabacion_stays_a_single_relation_in_bcnf():
    case = get_case("2")
    result = normalize(case.schema, "BCNF", case.names)
    assert result.relation_names() == ["Grabacion"]
    assert result.lossless


def test_campana_promocion_to_5nf():
    case = get_case("3")
    result = normalize(case.schema, "5NF", case.names)

    assert result.relation_names() == ["PromocionPlataforma", "PromocionPais"]
    assert result.lossless
    for rel in result.relations:
        assert rel.mvds == []


def test_campana_promocion_is_already_3nf():
    case = get_case("3")
    assert len(synthesize_3nf(case.schema, case.names)) == 1
    assert len(decompose_4nf(case.schema, case.names)) == 2


def test_bcnf_split_can_lose_a_dependency():
    schema = RelationSchema(
        name="R",
        attributes=[Attribute("A"), Attribute("B"), Attribute("C")],
        fds=[FD.of(["A", "B"], "C"), FD.of("C", "A")],
    )
    result = normalize(schema, "BCNF")

    assert {r.attribute_set for r in result.relations} == {frozenset("AC"), frozenset("BC")}
    assert result.lossless
    assert not result.preserves_dependencies


def test_unknown_target_is_rejected():
    with pytest.raises(ValueError):
        normalize(get_case("1").schema, "6NF")


def _cyclic_schema():
    # Supplier/part/project style relation: no FDs, one cyclic JD
    return RelationSchema(
        name="R",
        attributes=[Attribute("A"), Attribute("B"), Attribute("C")],
        jds=[JD.of(["A", "B"], ["B", "C"], ["A", "C"])],
    )


def test_decompose_5nf_splits_along_join_dependency():
    fragments = decompose_5nf(_cyclic_schema())
    assert [f.attribute_set for f in fragments] == [
        frozenset("AB"), frozenset("BC"), frozenset("AC"),
    ]
    for fragment in fragments:
        assert fragment.jds == []


def test_join_dependency_to_5nf_is_lossless():
    result = normalize(_cyclic_schema(), "5NF")

    assert result.relation_names() == ["R_1_1", "R_1_2", "R_1_3"]
    assert result.lossless
    assert result.preserves_dependencies


def test_join_dependency_left_alone_below_5nf():
    result = normalize(_cyclic_schema(), "4NF")
    assert result.relation_names() == ["R_1"]
    assert result.lossless
