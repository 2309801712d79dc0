"""
normalization/normal_forms.py
-----------------------------
Detects which normal forms (1NF … 5NF) a relation design violates and
explains why, in the wording used when presenting the analysis.

Every offending dependency is reported once, at the lowest normal form
it breaks; the forms are cumulative, so a relation that fails 2NF also
fails every form above it.
"""

from dataclasses import dataclass, field
from itertools import combinations

from models.relation import (
    NORMAL_FORMS,
    FunctionalDependency,
    KeyFinding,
    RelationSchema,
    Violation,
    format_attrs,
)
from normalization.dependencies import (
    candidate_keys,
    closure,
    determining_subset,
    is_lossless,
    is_superkey,
    minimal_cover,
    prime_attributes,
)
from utils.logger import get_logger

logger = get_logger(__name__)

_ANOMALIES = [
    "Anomalías de actualización: el mismo dato se repite en varias filas",
    "Anomalías de inserción: no se puede registrar el dato sin una fila completa",
    "Anomalías de eliminación: borrar una fila puede perder información",
]


@dataclass
class NormalFormReport:
    """
    Result of analysing one relation.

    Attributes:
        schema: The analysed relation.
        keys: Candidate keys derived from the FDs.
        prime: Attributes belonging to some candidate key.
        violations: Offending dependencies, lowest normal form first.
        key_findings: Remarks on the declared primary key.
    """
    schema: RelationSchema
    keys: list[frozenset[str]]
    prime: frozenset[str]
    violations: list[Violation] = field(default_factory=list)
    key_findings: list[KeyFinding] = field(default_factory=list)

    def violations_for(self, normal_form: str) -> list[Violation]:
        return [v for v in self.violations if v.normal_form == normal_form]

    def satisfies(self, normal_form: str) -> bool:
        """True if no violation exists at this normal form or below it."""
        level = NORMAL_FORMS.index(normal_form)
        return not any(NORMAL_FORMS.index(v.normal_form) <= level for v in self.violations)

    @property
    def highest_normal_form(self) -> str:
        reached = "0NF"
        for nf in NORMAL_FORMS:
            if not self.satisfies(nf):
                break
            reached = nf
        return reached

    def direct_violations(self) -> list[str]:
        """Normal forms with at least one offending dependency of their own."""
        return [nf for nf in NORMAL_FORMS if self.violations_for(nf)]

    def violated_forms(self) -> list[str]:
        """Every normal form the relation is not in (cumulative)."""
        return [nf for nf in NORMAL_FORMS if not self.satisfies(nf)]


def analyze(schema: RelationSchema) -> NormalFormReport:
    """
    Analyse a relation design against 1NF, 2NF, 3NF, BCNF, 4NF and 5NF.

    Args:
        schema: The relation with its declared dependencies.

    Returns:
        A NormalFormReport.

    Raises:
        ValueError: If the schema mentions unknown attributes.
    """
    schema.validate()
    attrs = schema.attribute_set
    cover = minimal_cover(schema.fds)
    keys = candidate_keys(attrs, cover)
    prime = prime_attributes(keys)

    report = NormalFormReport(schema=schema, keys=keys, prime=prime)
    report.key_findings = _check_declared_key(schema, keys, cover)
    report.violations.extend(_check_1nf(schema))
    partial = _check_2nf(schema, keys, prime, cover)
    report.violations.extend(partial)
    report.violations.extend(_check_3nf(schema, keys, prime, cover))
    report.violations.extend(_check_bcnf(schema, keys, prime, cover))
    report.violations.extend(_check_4nf(schema, cover))
    report.violations.extend(_check_5nf(schema, keys))

    logger.info(
        f"Analysed {schema.name}: keys={[sorted(k) for k in keys]}, "
        f"highest={report.highest_normal_form}, violations={len(report.violations)}"
    )
    return report


# ── KEYS ──────────────────────────────────────────────────

def _check_declared_key(
    schema: RelationSchema, keys: list[frozenset[str]], cover: list[FunctionalDependency]
) -> list[KeyFinding]:
    pk = schema.primary_key
    if not pk:
        return []
    order = schema.attribute_names
    findings = []

    if not is_superkey(pk, schema.attribute_set, cover):
        findings.append(KeyFinding(
            "not_superkey",
            f"La clave primaria declarada ({format_attrs(pk, order)}) no determina "
            f"todos los atributos: no es superclave.",
        ))
    elif pk not in keys:
        contained = [k for k in keys if k < pk]
        if contained:
            findings.append(KeyFinding(
                "not_minimal",
                f"La clave primaria declarada ({format_attrs(pk, order)}) no es mínima: "
                f"({format_attrs(contained[0], order)}) ya identifica cada fila, así que "
                f"{format_attrs(pk - contained[0], order)} sobra en la clave.",
            ))

    identity = [a.name for a in schema.attributes if a.identity and a.name in pk]
    if identity and len(pk) > 1:
        findings.append(KeyFinding(
            "identity_in_composite",
            f"La columna autogenerada {', '.join(identity)} forma parte de una clave "
            f"compuesta con atributos de negocio: un IDENTITY ya es único por sí solo.",
        ))
    return findings


# ── 1NF ───────────────────────────────────────────────────

def _check_1nf(schema: RelationSchema) -> list[Violation]:
    violations = []
    for attr in schema.non_atomic():
        element = attr.element or attr.name
        violations.append(Violation(
            normal_form="1NF",
            dependency=attr.name,
            reason=(
                f"El campo '{attr.name}' NO es atómico: guarda varios valores de "
                f"'{element}' en una sola celda, y cada uno tiene significado propio."
            ),
            consequences=[
                f"Buscar por un '{element}' concreto exige LIKE '%…%' en vez de una igualdad",
                f"No se puede indexar ni restringir cada '{element}' por separado",
            ],
        ))
    return violations


# ── 2NF ───────────────────────────────────────────────────

def _check_2nf(
    schema: RelationSchema,
    keys: list[frozenset[str]],
    prime: frozenset[str],
    cover: list[FunctionalDependency],
) -> list[Violation]:
    order = schema.attribute_names
    non_prime = schema.attribute_set - prime
    # attribute -> every proper key part (of any candidate key) that determines it
    owners: dict[str, list[frozenset[str]]] = {}
    for key in keys:
        key_attrs = sorted(key, key=order.index)
        for size in range(1, len(key)):
            for combo in combinations(key_attrs, size):
                part = frozenset(combo)
                for attr in sorted((closure(part, cover) & non_prime) - part):
                    parts = owners.setdefault(attr, [])
                    if part not in parts:
                        parts.append(part)

    # Only minimal parts are reported; a larger part adds nothing
    grouped: dict[frozenset[str], set[str]] = {}
    for attr, parts in owners.items():
        for part in parts:
            if not any(other < part for other in parts):
                grouped.setdefault(part, set()).add(attr)

    violations = []
    for part, dependents in grouped.items():
        key = next(k for k in keys if part < k)
        fd = FunctionalDependency(part, frozenset(dependents))
        violations.append(Violation(
            normal_form="2NF",
            dependency=fd.render(order),
            reason=(
                f"Dependencia parcial: {format_attrs(dependents, order)} depende SOLO de "
                f"{format_attrs(part, order)}, que es parte de la clave "
                f"({format_attrs(key, order)}), no de la clave completa."
            ),
            consequences=[
                f"Los datos de {format_attrs(part, order)} se repiten en cada fila que lo comparte",
                *_ANOMALIES,
            ],
        ))
    return violations


# ── 3NF ───────────────────────────────────────────────────

def _check_3nf(
    schema: RelationSchema,
    keys: list[frozenset[str]],
    prime: frozenset[str],
    cover: list[FunctionalDependency],
) -> list[Violation]:
    order = schema.attribute_names
    attrs = schema.attribute_set
    grouped: dict[frozenset[str], set[str]] = {}
    for fd in cover:
        if fd.rhs <= prime or is_superkey(fd.lhs, attrs, cover):
            continue
        if any(fd.lhs < key for key in keys):
            continue  # partial dependency, reported under 2NF
        grouped.setdefault(fd.lhs, set()).update(fd.rhs - prime)

    violations = []
    for lhs, dependents in grouped.items():
        key = keys[0]
        source = determining_subset(key, lhs, cover)
        chain = (
            f"{format_attrs(source, order)} → {format_attrs(lhs, order)} → "
            f"{format_attrs(dependents, order)}"
        )
        violations.append(Violation(
            normal_form="3NF",
            dependency=chain,
            reason=(
                f"Dependencia transitiva: {format_attrs(dependents, order)} depende de "
                f"{format_attrs(lhs, order)}, que no es clave, y solo a través de él "
                f"depende de la clave."
            ),
            consequences=[
                f"Cambiar {format_attrs(dependents, order)} obliga a actualizar TODAS las filas "
                f"con el mismo {format_attrs(lhs, order)}",
                "Alto riesgo de datos inconsistentes",
            ],
        ))
    return violations


# ── BCNF ──────────────────────────────────────────────────

def _check_bcnf(
    schema: RelationSchema,
    keys: list[frozenset[str]],
    prime: frozenset[str],
    cover: list[FunctionalDependency],
) -> list[Violation]:
    order = schema.attribute_names
    attrs = schema.attribute_set
    violations = []
    for fd in cover:
        if fd.is_trivial() or is_superkey(fd.lhs, attrs, cover):
            continue
        if not fd.rhs <= prime:
            continue  # non-prime dependents are 2NF/3NF violations
        violations.append(Violation(
            normal_form="BCNF",
            dependency=fd.render(order),
            reason=(
                f"Todo determinante debe ser superclave: {format_attrs(fd.lhs, order)} "
                f"determina {format_attrs(fd.rhs, order)} pero no identifica la fila."
            ),
            consequences=[
                f"La pareja {format_attrs(fd.attributes, order)} se repite en cada fila",
                *_ANOMALIES[:1],
            ],
        ))
    return violations


# ── 4NF ───────────────────────────────────────────────────

def _check_4nf(schema: RelationSchema, cover: list[FunctionalDependency]) -> list[Violation]:
    order = schema.attribute_names
    attrs = schema.attribute_set
    violations = []
    for mvd in schema.mvds:
        if mvd.is_trivial(attrs) or is_superkey(mvd.lhs, attrs, cover):
            continue
        others = mvd.complement(attrs)
        violations.append(Violation(
            normal_form="4NF",
            dependency=mvd.render(order),
            reason=(
                f"Dependencia multivalorada no trivial: para cada "
                f"({format_attrs(mvd.lhs, order)}) hay varios {format_attrs(mvd.rhs, order)} "
                f"independientes de {format_attrs(others, order)}, y "
                f"({format_attrs(mvd.lhs, order)}) no es superclave."
            ),
            consequences=[
                f"Redundancia masiva: producto cartesiano {format_attrs(mvd.rhs, order)} × "
                f"{format_attrs(others, order)}",
                f"Agregar un {format_attrs(mvd.rhs, order)} exige una fila por cada "
                f"{format_attrs(others, order)} existente",
                f"Eliminar un {format_attrs(others, order)} exige borrar varias filas",
            ],
        ))
    return violations


# ── 5NF ───────────────────────────────────────────────────

def _check_5nf(schema: RelationSchema, keys: list[frozenset[str]]) -> list[Violation]:
    order = schema.attribute_names
    attrs = schema.attribute_set
    key_fds = [FunctionalDependency(key, attrs) for key in keys]
    violations = []
    for jd in schema.jds:
        if jd.is_trivial(attrs):
            continue
        if is_lossless(attrs, jd.components, key_fds):
            continue
        violations.append(Violation(
            normal_form="5NF",
            dependency=jd.render(order),
            reason=(
                "Dependencia de join que no se deriva de las claves candidatas: la tabla "
                "solo se reconstruye uniendo sus proyecciones."
            ),
            consequences=["Las mismas combinaciones se almacenan varias veces"],
        ))
    return violations
