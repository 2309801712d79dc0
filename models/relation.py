"""
models/relation.py
------------------
Value types for logical relation schemas and their dependencies.
These are what the normalization engine reasons about; they carry no
database state.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Union

NORMAL_FORMS: tuple[str, ...] = ("1NF", "2NF", "3NF", "BCNF", "4NF", "5NF")

AttrSpec = Union[str, Iterable[str]]


def attr_set(spec: AttrSpec) -> frozenset[str]:
    """Build an attribute set from a single name or an iterable of names."""
    if isinstance(spec, str):
        return frozenset([spec])
    return frozenset(spec)


def format_attrs(attrs: Iterable[str], order: Optional[list[str]] = None) -> str:
    """Render attribute names in schema order (or alphabetically)."""
    if order:
        rank = {name: i for i, name in enumerate(order)}
        names = sorted(attrs, key=lambda a: (rank.get(a, len(rank)), a))
    else:
        names = sorted(attrs)
    return ", ".join(names)


@dataclass(frozen=True)
class FunctionalDependency:
    """
    X → Y: rows that agree on X agree on Y.

    Attributes:
        lhs: The determinant.
        rhs: The dependent attributes.
    """
    lhs: frozenset[str]
    rhs: frozenset[str]

    @classmethod
    def of(cls, lhs: AttrSpec, rhs: AttrSpec) -> "FunctionalDependency":
        return cls(attr_set(lhs), attr_set(rhs))

    @property
    def attributes(self) -> frozenset[str]:
        return self.lhs | self.rhs

    def is_trivial(self) -> bool:
        return self.rhs <= self.lhs

    def render(self, order: Optional[list[str]] = None) -> str:
        return f"{format_attrs(self.lhs, order)} → {format_attrs(self.rhs, order)}"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class MultivaluedDependency:
    """X →→ Y: the set of Y values for an X is independent of the other attributes."""
    lhs: frozenset[str]
    rhs: frozenset[str]

    @classmethod
    def of(cls, lhs: AttrSpec, rhs: AttrSpec) -> "MultivaluedDependency":
        return cls(attr_set(lhs), attr_set(rhs))

    @property
    def attributes(self) -> frozenset[str]:
        return self.lhs | self.rhs

    def is_trivial(self, all_attrs: frozenset[str]) -> bool:
        return self.rhs <= self.lhs or (self.lhs | self.rhs) >= all_attrs

    def complement(self, all_attrs: frozenset[str]) -> frozenset[str]:
        """The Z in X →→ Y | Z."""
        return all_attrs - self.lhs - self.rhs

    def render(self, order: Optional[list[str]] = None) -> str:
        return f"{format_attrs(self.lhs, order)} →→ {format_attrs(self.rhs, order)}"

    def __str__(self) -> str:
        return self.render()


@dataclass(frozen=True)
class JoinDependency:
    """⋈{R1, …, Rn}: the relation equals the join of its projections."""
    components: tuple[frozenset[str], ...]

    @classmethod
    def of(cls, *components: AttrSpec) -> "JoinDependency":
        return cls(tuple(attr_set(c) for c in components))

    @property
    def attributes(self) -> frozenset[str]:
        return frozenset().union(*self.components)

    def is_trivial(self, all_attrs: frozenset[str]) -> bool:
        return any(c >= all_attrs for c in self.components)

    def render(self, order: Optional[list[str]] = None) -> str:
        parts = " | ".join(f"({format_attrs(c, order)})" for c in self.components)
        return f"⋈{{{parts}}}"

    def __str__(self) -> str:
        return self.render()


@dataclass
class Attribute:
    """
    A column of a logical relation.

    Attributes:
        name: Column name as written in the table design.
        sql_type: Declared type (informational).
        atomic: False when the column stores a list of values.
        element: For non-atomic columns, the name each single value takes
            once the list is split (e.g. 'Idiomas' -> 'Idioma').
        identity: True for auto-generated (IDENTITY / SERIAL) columns.
    """
    name: str
    sql_type: str = "INT"
    atomic: bool = True
    element: Optional[str] = None
    identity: bool = False


@dataclass
class RelationSchema:
    """
    A relation design together with its declared dependencies.

    `primary_key` is the key as declared in the DDL; the engine derives
    candidate keys from the FDs independently and compares the two.
    """
    name: str
    attributes: list[Attribute]
    primary_key: Optional[frozenset[str]] = None
    fds: list[FunctionalDependency] = field(default_factory=list)
    mvds: list[MultivaluedDependency] = field(default_factory=list)
    jds: list[JoinDependency] = field(default_factory=list)
    description: str = ""

    @property
    def attribute_names(self) -> list[str]:
        return [a.name for a in self.attributes]

    @property
    def attribute_set(self) -> frozenset[str]:
        return frozenset(self.attribute_names)

    def attribute(self, name: str) -> Attribute:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        raise KeyError(name)

    def non_atomic(self) -> list[Attribute]:
        return [a for a in self.attributes if not a.atomic]

    def render(self) -> str:
        return f"{self.name}({', '.join(self.attribute_names)})"

    def validate(self) -> None:
        """
        Check that keys and dependencies only mention known attributes.

        Raises:
            ValueError: On duplicate or unknown attribute names.
        """
        names = self.attribute_names
        if len(names) != len(set(names)):
            raise ValueError(f"{self.name}: duplicate attribute names")
        known = self.attribute_set
        if self.primary_key is not None and not self.primary_key <= known:
            unknown = format_attrs(self.primary_key - known)
            raise ValueError(f"{self.name}: primary key mentions unknown attributes: {unknown}")
        deps = [*self.fds, *self.mvds, *self.jds]
        for dep in deps:
            unknown_attrs = dep.attributes - known
            if unknown_attrs:
                raise ValueError(
                    f"{self.name}: dependency {dep} mentions unknown attributes: "
                    f"{format_attrs(unknown_attrs)}"
                )


@dataclass
class Violation:
    """
    A reason why a relation fails a normal form.

    Attributes:
        normal_form: One of NORMAL_FORMS.
        dependency: The offending dependency rendered as text (or the
            non-atomic attribute for 1NF).
        reason: Why it breaks the normal form.
        consequences: The anomalies it causes.
    """
    normal_form: str
    dependency: str
    reason: str
    consequences: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return f"[{self.normal_form}] {self.dependency}: {self.reason}"


@dataclass
class KeyFinding:
    """A remark about the declared primary key (kind: 'not_superkey' | 'not_minimal' | 'identity_in_composite')."""
    kind: str
    detail: str

    def __str__(self) -> str:
        return self.detail
