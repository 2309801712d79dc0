"""The DDL, seed data and integrity catalogues agree with each other."""

import re

from db.init_db import DROP_SQL, SCHEMA_SQL, TABLES
from db.seed import SEED_SQL
from repositories.integrity_repo import FOREIGN_KEYS, UNIQUE_KEYS


def test_every_table_is_created():
    created = re.findall(r"CREATE TABLE IF NOT EXISTS (\w+)", SCHEMA_SQL)
    assert created == TABLES


def test_tables_are_dropped_in_reverse_order():
    dropped = re.findall(r"DROP TABLE IF EXISTS (\w+)", DROP_SQL)
    assert dropped == list(reversed(TABLES))


def test_foreign_keys_match_ddl():
    declared = re.findall(r"CONSTRAINT (fk_\w+)", SCHEMA_SQL)
    assert sorted(declared) == sorted(fk.name for fk in FOREIGN_KEYS)
    for fk in FOREIGN_KEYS:
        assert f"FOREIGN KEY ({fk.column}) REFERENCES {fk.ref_table}({fk.ref_column})" in SCHEMA_SQL


def test_named_unique_constraints_match_ddl():
    declared = re.findall(r"CONSTRAINT (uq_\w+)", SCHEMA_SQL)
    assert sorted(declared) == sorted(uk.name for uk in UNIQUE_KEYS if uk.name.startswith("uq_"))


def test_referenced_tables_are_created_first():
    for fk in FOREIGN_KEYS:
        assert TABLES.index(fk.ref_table) < TABLES.index(fk.table)


def test_seed_is_idempotent():
    inserts = re.findall(r"INSERT INTO (\w+)", SEED_SQL)
    assert set(inserts) == set(TABLES)
    assert SEED_SQL.count("INSERT INTO") == SEED_SQL.count("ON CONFLICT")


def _seed_rows() -> dict[str, list[dict]]:
    """Rows inserted by SEED_SQL, by table, with values kept as SQL text."""
    rows: dict[str, list[dict]] = {}
    pattern = re.compile(r"INSERT INTO (\w+) \(([^)]*)\) VALUES(.*?)ON CONFLICT", re.DOTALL)
    for table, columns, values in pattern.findall(SEED_SQL):
        names = [c.strip() for c in columns.split(",")]
        for group in re.findall(r"\(([^()]*)\)", values):
            rows.setdefault(table, []).append(
                dict(zip(names, (v.strip() for v in group.split(","))))
            )
    return rows


def test_seed_rows_match_their_columns():
    for table, rows in _seed_rows().items():
        widths = {len(row) for row in rows}
        assert len(widths) == 1, table


def test_every_seeded_foreign_key_resolves():
    rows = _seed_rows()
    for fk in FOREIGN_KEYS:
        children = {row[fk.column] for row in rows.get(fk.table, [])}
        parents = {row[fk.ref_column] for row in rows.get(fk.ref_table, [])}
        assert children, f"no seed rows for {fk}"
        assert children <= parents, f"{fk}: unresolved {sorted(children - parents)}"


def test_seed_respects_unique_constraints():
    rows = _seed_rows()
    for uk in UNIQUE_KEYS:
        values = [tuple(row[c] for c in uk.columns) for row in rows.get(uk.table, [])]
        assert len(values) == len(set(values)), uk.name
