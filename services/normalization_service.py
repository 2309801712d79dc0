"""
services/normalization_service.py
---------------------------------
Turns the normalization engine's results into the text the bot sends:
case list, normal-form analysis, proposed decomposition and the checks
run on the sample rows.
"""

from models.relation import NORMAL_FORMS, RelationSchema, format_attrs
from normalization import instance
from normalization.cases import WorkedCase, get_case, list_cases
from normalization.decomposition import normalize
from normalization.normal_forms import analyze
from utils.logger import get_logger

logger = get_logger(__name__)


class NormalizationService:
    """Builds the analysis reports for the worked cases."""

    def list_cases(self) -> str:
        lines = ["📚 *Puntos disponibles*\n"]
        for case in list_cases():
            lines.append(
                f"*{case.key}.* {case.title}\n"
                f"  `{case.schema.render()}`\n"
                f"  🎯 Objetivo: {case.target}"
            )
        lines.append("\n💡 Usa `/analyze <n>`, `/normalize <n>` o `/sample <n>`.")
        return "\n\n".join(lines)

    def analyze_case(self, key: str) -> str:
        """Normal-form analysis of a case's denormalized design."""
        case = self._find(key)
        if case is None:
            return self._unknown(key)

        schema = case.schema
        order = schema.attribute_names
        report = analyze(schema)

        lines = [
            f"🔍 *Punto {case.key}: {schema.name}*",
            f"`{schema.render()}`",
        ]
        if schema.description:
            lines.append(f"_{schema.description}_")

        lines.append("\n📋 *Reglas de negocio:*")
        lines.extend(f"  • {rule}" for rule in case.business_rules)

        lines.append("\n🔗 *Dependencias declaradas:*")
        for dep in [*schema.fds, *schema.mvds, *schema.jds]:
            lines.append(f"  • `{dep.render(order)}`")

        keys = " | ".join(f"({format_attrs(k, order)})" for k in report.keys)
        lines.append(f"\n🔑 Claves candidatas: {keys}")
        lines.append(f"⭐ Atributos primos: {format_attrs(report.prime, order) or 'ninguno'}")

        if report.key_findings:
            lines.append("\n🗝️ *Sobre la clave declarada:*")
            lines.extend(f"  • {f.detail}" for f in report.key_findings)

        for nf in NORMAL_FORMS:
            violations = report.violations_for(nf)
            if not violations:
                continue
            lines.append(f"\n❌ *Viola {nf}*")
            for v in violations:
                lines.append(f"  • `{v.dependency}`\n    {v.reason}")
                lines.extend(f"    ↳ {c}" for c in v.consequences)

        satisfied = [nf for nf in NORMAL_FORMS if report.satisfies(nf)]
        if satisfied:
            lines.append(f"\n✅ Cumple: {', '.join(satisfied)}")
        lines.append(f"📐 Forma normal más alta: *{report.highest_normal_form}*")

        if case.claimed_violation and report.satisfies(case.claimed_violation):
            lines.append(
                f"\n📝 El ejercicio concluye que {schema.name} NO está en "
                f"{case.claimed_violation}: {case.claim}.\n"
                f"   Con las dependencias declaradas, {keys} es clave candidata, así que "
                f"todo determinante es superclave; lo que falla es la clave declarada, "
                f"no la forma normal."
            )
        return "\n".join(lines)

    def normalize_case(self, key: str) -> str:
        """Engine decomposition to the case's target plus the proposed tables."""
        case = self._find(key)
        if case is None:
            return self._unknown(key)

        result = normalize(case.schema, case.target, case.names)
        lines = [f"🛠️ *Punto {case.key}: normalización hasta {case.target}*\n"]

        lines.append("⚙️ *Descomposición calculada:*")
        for rel in result.relations:
            lines.append(f"  • `{rel.render()}`")
        lines.extend(f"  ℹ️ {note}" for note in result.notes)
        lines.append(
            f"  {'✅' if result.lossless else '❌'} Join sin pérdida   "
            f"{'✅' if result.preserves_dependencies else '⚠️'} Preserva dependencias"
        )

        lines.append("\n🏗️ *Tablas propuestas:*")
        for rel in case.proposed:
            lines.append(self._verdict(rel))

        if case.tables:
            tables = ", ".join(f"`{t}`" for t in case.tables)
            lines.append(f"\n🐘 Tablas PostgreSQL: {tables}")
        return "\n".join(lines)

    def instance_report(self, key: str) -> str:
        """What the sample rows show: dependencies, 1NF values, redundancy."""
        case = self._find(key)
        if case is None:
            return self._unknown(key)

        df = instance.to_frame(case)
        lines = [f"🧪 *Punto {case.key}: datos de ejemplo ({len(df)} filas)*\n"]

        for attr in case.schema.non_atomic():
            bad = instance.find_non_atomic(df, attr.name)
            if bad:
                shown = "; ".join(f"\"{v}\"" for v in bad)
                lines.append(f"⚠️ `{attr.name}` no atómico en: {shown}")

        for check in instance.check_declared_dependencies(case):
            icon = "✅" if check["holds"] else "❌"
            lines.append(f"{icon} {check['kind']} `{check['dependency']}`")
            for ev in check["evidence"]:
                where = ", ".join(f"{k}={v}" for k, v in ev.items() if k != "values")
                seen = ", ".join(str(v if len(v) > 1 else v[0]) for v in ev["values"])
                lines.append(f"    ↳ con {where} aparecen: {seen}")

        flat = instance.flatten(case)
        fragments = self._fragments(case)
        if fragments:
            summary = instance.redundancy_summary(flat, fragments)
            lossless = instance.is_lossless_on_instance(flat, fragments.values())
            lines.append("\n📦 *Redundancia*")
            lines.append(f"  Tabla original: {summary['original_rows']} filas")
            for name, rows in summary["fragments"].items():
                lines.append(f"  • `{name}`: {rows} filas")
            lines.append(
                f"  Total: {summary['total_rows']} filas "
                f"({abs(summary['saved_pct']):.1f}% {'menos' if summary['saved_rows'] >= 0 else 'más'})"
            )
            lines.append(f"  Celdas: {summary['original_cells']} → {summary['total_cells']}")
            lines.append(f"  {'✅' if lossless else '❌'} El join de las tablas reconstruye los datos")
        return "\n".join(lines)

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _find(key: str) -> WorkedCase | None:
        try:
            return get_case(key)
        except KeyError as e:
            logger.warning(str(e))
            return None

    @staticmethod
    def _unknown(key: str) -> str:
        return f"⚠️ No existe el punto \"{key}\". Usa /cases para ver la lista."

    @staticmethod
    def _fragments(case: WorkedCase) -> dict[str, frozenset[str]]:
        """Engine fragments of a case by table name; empty when nothing is split."""
        result = normalize(case.schema, case.target, case.names)
        if len(result.relations) < 2:
            return {}
        return {rel.name: rel.attribute_set for rel in result.relations}

    @staticmethod
    def _verdict(rel: RelationSchema) -> str:
        report = analyze(rel)
        keys = " | ".join(f"({format_attrs(k, rel.attribute_names)})" for k in report.keys)
        line = f"  • `{rel.render()}`\n    🔑 {keys} → *{report.highest_normal_form}*"
        if rel.description:
            line += f"\n    _{rel.description}_"
        return line
