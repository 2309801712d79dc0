"""The worked cases are well formed and match the physical schema."""

import pytest

from db.init_db import TABLES
from normalization.cases import get_case, list_cases


def test_cases_in_order():
    assert [c.key for c in list_cases()] == ["1", "2", "3"]
    assert get_case(" 2 ").schema.name == "Grabacion"


def test_unknown_case_raises_key_error():
    with pytest.raises(KeyError):
        get_case("9")


@pytest.mark.parametrize("case", list_cases(), ids=lambda c: c.schema.name)
def test_case_is_well_formed(case):
    case.schema.validate()
    for rel in case.proposed:
        rel.validate()
    width = len(case.schema.attributes)
    assert all(len(row) == width for row in case.sample_rows)
    assert set(case.tables) <= set(TABLES)


def test_promotion_sample_is_a_full_cartesian_product():
    rows = get_case("3").sample_rows
    assert len(rows) == 12
    assert len({r[2] for r in rows}) == 3
    assert len({r[3] for r in rows}) == 4
