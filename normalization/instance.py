"""
normalization/instance.py
-------------------------
Checks dependencies and decompositions against actual rows, using
pandas DataFrames built from a case's denormalized sample data.

Theory (normal_forms.py) says what *must* hold for every instance;
these helpers show what *does* hold on the sample, and measure the
redundancy a decomposition removes.
"""

from functools import reduce
from typing import Iterable, Mapping

import pandas as pd

from config import MULTIVALUE_SEPARATOR
from models.relation import FunctionalDependency, MultivaluedDependency
from utils.logger import get_logger

logger = get_logger(__name__)


def to_frame(case) -> pd.DataFrame:
    """DataFrame of a WorkedCase's denormalized sample rows."""
    return pd.DataFrame(case.sample_rows, columns=case.schema.attribute_names)


def _ordered(df: pd.DataFrame, attrs: Iterable[str]) -> list[str]:
    wanted = set(attrs)
    missing = wanted - set(df.columns)
    if missing:
        raise ValueError(f"Columns not in frame: {sorted(missing)}")
    return [c for c in df.columns if c in wanted]


def fd_holds(df: pd.DataFrame, fd: FunctionalDependency) -> bool:
    """True if every group of rows sharing the LHS has a single RHS value."""
    lhs = _ordered(df, fd.lhs)
    rhs = _ordered(df, fd.rhs - fd.lhs)
    if not rhs or df.empty:
        return True
    counts = df.groupby(lhs, dropna=False)[rhs].nunique(dropna=False)
    return bool((counts <= 1).all().all())


def fd_violations(df: pd.DataFrame, fd: FunctionalDependency) -> list[dict]:
    """
    LHS values for which the FD fails, with the distinct RHS values seen.

    Returns:
        List of dicts: [{<lhs col>: value, ..., 'values': [rhs tuples]}, ...]
    """
    lhs = _ordered(df, fd.lhs)
    rhs = _ordered(df, fd.rhs - fd.lhs)
    if not rhs or df.empty:
        return []
    evidence = []
    for values, group in df.groupby(lhs, dropna=False):
        seen = group[rhs].drop_duplicates()
        if len(seen) > 1:
            values = values if isinstance(values, tuple) else (values,)
            entry = dict(zip(lhs, values))
            entry["values"] = [tuple(r) for r in seen.itertuples(index=False)]
            evidence.append(entry)
    return evidence


def mvd_holds(df: pd.DataFrame, mvd: MultivaluedDependency) -> bool:
    """
    True if, for every LHS value, the RHS values combine freely with the
    remaining columns, i.e. π_XY ⋈ π_XZ gives back the rows.
    """
    x = _ordered(df, mvd.lhs)
    y = _ordered(df, mvd.rhs - mvd.lhs)
    z = [c for c in df.columns if c not in x and c not in y]
    if not y or not z or df.empty:
        return True
    left = df[x + y].drop_duplicates()
    right = df[x + z].drop_duplicates()
    joined = left.merge(right, on=x) if x else left.merge(right, how="cross")
    return len(joined) == len(df[x + y + z].drop_duplicates())


def find_non_atomic(
    df: pd.DataFrame, column: str, separator: str = MULTIVALUE_SEPARATOR
) -> list[str]:
    """Values of `column` that split into more than one element."""
    values = df[column].dropna().astype(str)
    return [v for v in values.unique() if len([p for p in v.split(separator) if p.strip()]) > 1]


def explode_column(
    df: pd.DataFrame, column: str, element: str, separator: str = MULTIVALUE_SEPARATOR
) -> pd.DataFrame:
    """
    1NF flattening: one row per element of a list-valued column.
    The element column takes the list column's position.
    """
    position = list(df.columns).index(column)
    pieces = df[column].astype(str).str.split(separator)
    flat = df.assign(**{element: pieces}).explode(element)
    flat[element] = flat[element].str.strip()
    flat = flat[flat[element] != ""]
    columns = [c for c in df.columns if c != column]
    columns.insert(position, element)
    return flat[columns].reset_index(drop=True)


def flatten(case) -> pd.DataFrame:
    """Sample rows of a case with every list-valued column exploded."""
    df = to_frame(case)
    for attr in case.schema.non_atomic():
        df = explode_column(df, attr.name, attr.element or attr.name)
    return df


def project(df: pd.DataFrame, attrs: Iterable[str]) -> pd.DataFrame:
    """π_attrs: distinct rows over the given columns, in frame order."""
    return df[_ordered(df, attrs)].drop_duplicates().reset_index(drop=True)


def rejoin(frames: list[pd.DataFrame]) -> pd.DataFrame:
    """Natural join of projections (cross join where no column is shared)."""
    def _join(left: pd.DataFrame, right: pd.DataFrame) -> pd.DataFrame:
        common = [c for c in left.columns if c in right.columns]
        if not common:
            return left.merge(right, how="cross")
        return left.merge(right, on=common)
    return reduce(_join, frames).drop_duplicates().reset_index(drop=True)


def _row_set(df: pd.DataFrame, columns: list[str]) -> set[tuple]:
    return set(df[columns].itertuples(index=False, name=None))


def is_lossless_on_instance(df: pd.DataFrame, fragments: Iterable[Iterable[str]]) -> bool:
    """True if joining the projections onto `fragments` yields exactly the rows."""
    parts = [project(df, f) for f in fragments]
    joined = rejoin(parts)
    columns = list(df.columns)
    if set(joined.columns) != set(columns):
        return False
    return _row_set(joined, columns) == _row_set(df.drop_duplicates(), columns)


def redundancy_summary(df: pd.DataFrame, fragments: Mapping[str, Iterable[str]]) -> dict:
    """
    Compare the row count of a table with the rows its decomposition stores.

    Args:
        df: The denormalized rows.
        fragments: Table name -> attributes of each replacement table.

    Returns:
        Dict with 'original_rows', 'fragments' (name -> rows), 'total_rows',
        'saved_rows', 'saved_pct' (one decimal), and the same comparison in
        stored values: 'original_cells' and 'total_cells'.
    """
    original = len(df.drop_duplicates())
    projections = {name: project(df, attrs) for name, attrs in fragments.items()}
    rows = {name: len(p) for name, p in projections.items()}
    total = sum(rows.values())
    saved = original - total
    pct = round(saved / original * 100, 1) if original else 0.0
    logger.debug(f"Redundancy: {original} rows -> {rows} ({pct}% saved)")
    return {
        "original_rows": original,
        "fragments": rows,
        "total_rows": total,
        "saved_rows": saved,
        "saved_pct": pct,
        "original_cells": original * len(df.columns),
        "total_cells": sum(p.size for p in projections.values()),
    }


def check_declared_dependencies(case) -> list[dict]:
    """
    Test each declared FD and MVD of a case against its sample rows.

    Returns:
        List of dicts: [{'kind': 'FD'|'MVD', 'dependency': str, 'holds': bool,
        'evidence': list}, ...]
    """
    df = to_frame(case)
    order = case.schema.attribute_names
    results = []
    for fd in case.schema.fds:
        results.append({
            "kind": "FD",
            "dependency": fd.render(order),
            "holds": fd_holds(df, fd),
            "evidence": fd_violations(df, fd),
        })
    for mvd in case.schema.mvds:
        results.append({
            "kind": "MVD",
            "dependency": mvd.render(order),
            "holds": mvd_holds(df, mvd),
            "evidence": [],
        })
    failing = [r["dependency"] for r in results if not r["holds"]]
    if failing:
        logger.info(f"Case {case.key}: sample rows contradict {failing}")
    return results
