"""Dependency and redundancy checks against the sample rows (pandas)."""

import pandas as pd

from normalization import instance
from normalization.cases import get_case

PLATFORM = ["IdCancion", "IdInterprete", "Plataforma"]
COUNTRY = ["IdCancion", "IdInterprete", "Pais"]


def test_promotion_campaign_redundancy():
    df = instance.to_frame(get_case("3"))
    summary = instance.redundancy_summary(df, {"PromocionPlataforma": PLATFORM, "PromocionPais": COUNTRY})

    assert summary["original_rows"] == 12
    assert summary["fragments"] == {"PromocionPlataforma": 3, "PromocionPais": 4}
    assert summary["total_rows"] == 7
    assert summary["saved_rows"] == 5
    assert summary["saved_pct"] == 41.7
    assert summary["original_cells"] == 48
    assert summary["total_cells"] == 21


def test_promotion_mvds_hold_on_full_cartesian_product():
    case = get_case("3")
    df = instance.to_frame(case)
    assert all(instance.mvd_holds(df, mvd) for mvd in case.schema.mvds)
    assert instance.is_lossless_on_instance(df, [PLATFORM, COUNTRY])


def test_mvd_fails_when_a_combination_is_missing():
    case = get_case("3")
    df = instance.to_frame(case).drop(index=0)
    assert not instance.mvd_holds(df, case.schema.mvds[0])


def test_recording_fd_is_contradicted_by_sample_rows():
    case = get_case("2")
    df = instance.to_frame(case)
    fd = case.schema.fds[0]

    assert not instance.fd_holds(df, fd)
    evidence = instance.fd_violations(df, fd)
    assert len(evidence) == 2
    assert evidence[0]["IdInterpretacion"] == 1
    assert evidence[0]["IdAlbum"] == 1
    assert evidence[0]["values"] == [(1,), (3,)]


def test_check_declared_dependencies():
    checks = instance.check_declared_dependencies(get_case("2"))
    assert [(c["kind"], c["holds"]) for c in checks] == [("FD", False)]

    checks = instance.check_declared_dependencies(get_case("1"))
    assert all(c["holds"] for c in checks)


def test_languages_are_not_atomic():
    df = instance.to_frame(get_case("1"))
    assert instance.find_non_atomic(df, "Idiomas") == ["Español, Inglés"]


def test_flatten_explodes_languages_in_place():
    flat = instance.flatten(get_case("1"))

    assert len(flat) == 3
    assert list(flat.columns).index("Idioma") == 6
    assert list(flat["Idioma"]) == ["Español", "Inglés", "Inglés"]


def test_catalog_decomposition_trades_rows_for_fewer_cells():
    case = get_case("1")
    flat = instance.flatten(case)
    fragments = {
        "Pais": ["IdPais", "Pais"],
        "Interprete": ["IdInterprete", "NombreInterprete", "IdPais"],
        "Cancion": ["IdCancion", "TituloCancion", "Ritmo"],
        "CancionIdioma": ["IdCancion", "Idioma"],
        "InterpreteCancion": ["IdInterprete", "IdCancion"],
    }
    summary = instance.redundancy_summary(flat, fragments)

    assert summary["original_rows"] == 3
    assert summary["total_rows"] == 9
    assert summary["original_cells"] == 24
    assert summary["total_cells"] == 21
    assert instance.is_lossless_on_instance(flat, fragments.values())


def test_lossy_split_is_detected():
    df = pd.DataFrame({"A": [1, 2], "B": ["x", "x"], "C": ["p", "q"]})
    assert not instance.is_lossless_on_instance(df, [["A", "B"], ["B", "C"]])
    assert len(instance.rejoin([instance.project(df, ["A", "B"]), instance.project(df, ["B", "C"])])) == 4
