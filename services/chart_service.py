"""
services/chart_service.py
--------------------------
Generates chart images for donation analysis.
Uses matplotlib and returns PNGs as BytesIO buffers.
"""

import io

import matplotlib
matplotlib.use("Agg")  # Non-interactive backend for server use
import matplotlib.pyplot as plt

from utils.logger import get_logger

logger = get_logger(__name__)

_BAR_COLOR = "#0b7285"
_TEXT_COLOR = "#1d3557"


class ChartService:
    """Generates visual charts for donation data."""

    def generate_monthly_bar(self, monthly: list[dict], currency: str = "INR",
                             title: str = "Donations per month") -> io.BytesIO | None:
        """
        Bar chart of donation totals per month.

        Args:
            monthly: [{'month' or 'period': 'YYYY-MM', 'total': float}, ...] in order.
            currency: Label for the y axis.
            title: Chart title.

        Returns:
            BytesIO buffer with PNG image, or None if no data.
        """
        if not monthly:
            return None

        labels = [m.get("month") or m.get("period") for m in monthly]
        totals = [m["total"] for m in monthly]

        fig, ax = plt.subplots(figsize=(9, 4.5))
        bars = ax.bar(range(len(labels)), totals, color=_BAR_COLOR, width=0.6, zorder=3)

        for bar, total in zip(bars, totals):
            ax.text(
                bar.get_x() + bar.get_width() / 2, bar.get_height(),
                f"{total:,.0f}",
                ha="center", va="bottom", fontsize=9, color=_TEXT_COLOR,
            )

        ax.set_xticks(range(len(labels)))
        ax.set_xticklabels(labels, rotation=45, ha="right", fontsize=9)
        ax.set_ylabel(f"Amount ({currency})", color=_TEXT_COLOR)
        ax.set_title(f"{title}\nTotal: {sum(totals):,.2f} {currency}",
                     fontsize=12, fontweight="bold", color=_TEXT_COLOR)
        ax.spines["top"].set_visible(False)
        ax.spines["right"].set_visible(False)
        ax.grid(axis="y", alpha=0.3)
        ax.set_axisbelow(True)

        plt.tight_layout()

        buf = io.BytesIO()
        fig.savefig(buf, format="png", dpi=150, bbox_inches="tight")
        buf.seek(0)
        plt.close(fig)

        logger.info(f"Generated monthly donations chart ({len(labels)} months)")
        return buf
