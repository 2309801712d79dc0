"""
services/chart_service.py
--------------------------
Generates chart images for the normalization cases.
Uses matplotlib to draw bar charts and returns them as BytesIO buffers.
"""

import io

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server use
import matplotlib.pyplot as plt

from normalization import instance
from normalization.cases import get_case
from normalization.decomposition import normalize
from utils.logger import get_logger

logger = get_logger(__name__)

plt.rcParams["font.family"] = "DejaVu Sans"
plt.rcParams["figure.facecolor"] = "#1a1a2e"
plt.rcParams["text.color"] = "#e0e0e0"
plt.rcParams["axes.facecolor"] = "#1a1a2e"

_ORIGINAL_COLOR = "#FF6B6B"
_FRAGMENT_COLORS = ["#4ECDC4", "#45B7D1", "#96CEB4", "#FFEAA7", "#DDA0DD", "#98D8C8"]
_TOTAL_COLOR = "#F7DC6F"


class ChartService:
    """Generates visual charts for the worked cases."""

    def generate_redundancy_bar(self, key: str) -> io.BytesIO | None:
        """
        Bar chart of the denormalized row count against the rows each
        replacement table stores for the same sample data.

        Returns:
            BytesIO buffer with PNG image, or None if the case is not split.

        Raises:
            KeyError: If the case does not exist.
        """
        case = get_case(key)
        result = normalize(case.schema, case.target, case.names)
        if len(result.relations) < 2:
            return None

        flat = instance.flatten(case)
        fragments = {rel.name: rel.attribute_set for rel in result.relations}
        summary = instance.redundancy_summary(flat, fragments)

        labels = [case.schema.name, *summary["fragments"].keys(), "Total"]
        values = [summary["original_rows"], *summary["fragments"].values(), summary["total_rows"]]
        colors = [
            _ORIGINAL_COLOR,
            *(_FRAGMENT_COLORS[i % len(_FRAGMENT_COLORS)] for i in range(len(fragments))),
            _TOTAL_COLOR,
        ]

        fig, ax = plt.subplots(figsize=(9, 5))

        bars = ax.bar(
            range(len(values)), values,
            color=colors,
            edgecolor="#1a1a2e",
            linewidth=1.5,
            width=0.6,
            zorder=3,
        )

        for bar, value in zip(bars, values):
            ax.text(
                bar.get_x() + bar.get_width() / 2, bar.get_height() + 0.1,
                f"{value}",
                ha="center", va="bottom",
                color="#e0e0e0", fontsize=10, fontweight="bold",
            )

        ax.set_xticks(range(len(values)))
        ax.set_xticklabels(labels, fontsize=9, color="#e0e0e0", rotation=15)
        ax.set_ylabel("Filas", fontsize=11, color="#e0e0e0")

        change = "menos" if summary["saved_rows"] >= 0 else "más"
        ax.set_title(
            f"Punto {case.key}: {summary['original_rows']} filas → {summary['total_rows']} filas "
            f"({abs(summary['saved_pct']):.1f}% {change})\n"
            f"Celdas: {summary['original_cells']} → {summary['total_cells']}",
            fontsize=13, fontweight="bold", pad=15,
        )

        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        ax.spines["left"].set_color("#444")
        ax.spines["bottom"].set_color("#444")
        ax.tick_params(colors="#e0e0e0")
        ax.grid(axis="y", alpha=0.2, color="#888")
        ax.set_axisbelow(True)

        plt.tight_layout()

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=150, bbox_inches="tight",
                    facecolor=fig.get_facecolor())
        buf.seek(0)
        plt.close(fig)

        logger.info(f"Generated redundancy chart for case {case.key}")
        return buf
