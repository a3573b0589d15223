"""
Chart and HTML rendering for tool responses.

Provides functionality for:
- Income/expense charts (bar, line, pie) rendered with matplotlib/seaborn
- HTML fragments embedding the chart and totals
- HTML transaction tables
"""

import base64
import io
import logging
from typing import Optional, Union

import matplotlib
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from matplotlib.ticker import FuncFormatter

from tally.config import CHART_DPI, CHART_FORMAT, CHART_HEIGHT, CHART_WIDTH
from tally.db.models import Entry
from tally.errors import ValidationError
from tally.models import ChartType

from .aggregation import ChartSeries
from .formatting import format_amount, format_signed_amount

# Use non-interactive backend for server rendering
matplotlib.use("Agg")

logger = logging.getLogger(__name__)

COLORS = {
    "income": "#48bb78",
    "income_edge": "#38a169",
    "expense": "#f56565",
    "expense_edge": "#e53e3e",
}

CONTAINER_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "padding: 20px; background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); "
    "border-radius: 12px;"
)
CARD_STYLE = (
    "background: white; border-radius: 8px; padding: 24px; "
    "box-shadow: 0 4px 6px rgba(0,0,0,0.1);"
)
TITLE_STYLE = "margin: 0 0 20px; color: #1a202c; font-size: 24px; font-weight: 600;"

TABLE_CSS = """
<style>
  .txn-table { width: 100%; border-collapse: collapse; background: white; }
  .txn-table th { padding: 12px 16px; text-align: left; font-weight: 600;
                  color: white; background: #667eea; border-bottom: 2px solid #e2e8f0; }
  .txn-table td { padding: 12px 16px; border-bottom: 1px solid #e2e8f0; color: #4a5568; }
  .txn-table tr:nth-child(even) td { background: #f7fafc; }
</style>
"""


def parse_chart_type(value: Union[str, ChartType]) -> ChartType:
    try:
        return ChartType(value)
    except ValueError:
        choices = ", ".join(c.value for c in ChartType)
        raise ValidationError(
            f"Invalid chartType: {value!r} (expected one of {choices})"
        ) from None


def _dollar_formatter():
    return FuncFormatter(lambda x, p: f"${x:,.0f}")


class ChartService:
    """Service for rendering ledger data as charts and HTML fragments."""

    def __init__(self):
        # Set up seaborn style
        try:
            sns.set_theme(style="whitegrid")
            logger.info("ChartService initialized successfully")
        except Exception as e:
            logger.warning(f"Failed to set seaborn theme: {e}")

    def render_chart(
        self, series: ChartSeries, chart_type: Union[str, ChartType] = ChartType.BAR
    ) -> io.BytesIO:
        """
        Render an income/expense chart.

        Args:
            series: Aggregated bucket data
            chart_type: bar or line over the buckets, or pie of the totals

        Returns:
            BytesIO buffer containing the PNG image
        """
        chart_type = parse_chart_type(chart_type)

        fig = None
        try:
            fig, ax = plt.subplots(figsize=(CHART_WIDTH, CHART_HEIGHT))

            if series.is_empty():
                ax.text(
                    0.5,
                    0.5,
                    "No transaction data available",
                    ha="center",
                    va="center",
                    fontsize=14,
                )
                ax.set_axis_off()
            elif chart_type == ChartType.PIE:
                self._draw_pie(ax, series)
            else:
                self._draw_series(ax, series, chart_type)

            fig.tight_layout()

            buf = io.BytesIO()
            fig.savefig(buf, format=CHART_FORMAT, dpi=CHART_DPI, bbox_inches="tight")
            buf.seek(0)

            logger.debug(
                f"Generated {chart_type.value} chart with {len(series.labels)} buckets"
            )
            return buf
        except Exception as e:
            logger.error(f"Error generating chart: {e}", exc_info=True)
            raise
        finally:
            # Always close the figure to free memory
            if fig is not None:
                plt.close(fig)

    def _draw_series(self, ax, series: ChartSeries, chart_type: ChartType):
        df = pd.DataFrame(
            {"Income": series.income, "Expense": series.expense},
            index=series.labels,
        )
        colors = [COLORS["income"], COLORS["expense"]]

        if chart_type == ChartType.LINE:
            df.plot(kind="line", ax=ax, color=colors, linewidth=2.5, marker="o")
            positions = range(len(df))
            for column, color in zip(df.columns, colors):
                ax.fill_between(positions, 0, df[column], alpha=0.2, color=color)
            ax.set_xticks(list(positions))
            ax.set_xticklabels(df.index)
        else:
            df.plot(kind="bar", ax=ax, color=colors, alpha=0.8, edgecolor="white")

        ax.set_title(
            f"Income vs Expense by {series.group_by.value.title()}",
            fontsize=14,
            fontweight="bold",
        )
        ax.set_xlabel("")
        ax.set_ylabel("Amount", fontsize=11)
        ax.set_ylim(bottom=0)
        ax.tick_params(axis="x", rotation=45)
        ax.yaxis.set_major_formatter(_dollar_formatter())
        ax.legend(loc="upper left")

    def _draw_pie(self, ax, series: ChartSeries):
        ax.pie(
            [series.total_income, series.total_expense],
            labels=["Income", "Expense"],
            colors=[COLORS["income"], COLORS["expense"]],
            wedgeprops={"linewidth": 2, "edgecolor": "white"},
            autopct=lambda pct: f"{pct:.1f}%",
            startangle=90,
        )
        ax.set_title("Income vs Expense", fontsize=14, fontweight="bold")
        ax.axis("equal")

    def render_chart_html(
        self,
        series: ChartSeries,
        chart_type: Union[str, ChartType] = ChartType.BAR,
        image: Optional[io.BytesIO] = None,
    ) -> str:
        """
        Render the chart and totals as an HTML fragment.

        Args:
            series: Aggregated bucket data
            chart_type: Chart type to render when ``image`` is not given
            image: Pre-rendered PNG buffer

        Returns:
            HTML string with the chart embedded as a data URI
        """
        if image is None:
            image = self.render_chart(series, chart_type)
        encoded = base64.b64encode(image.getvalue()).decode("ascii")

        balance = series.balance
        balance_bg = "#bee3f8" if balance >= 0 else "#fbb6ce"
        balance_fg = "#2c5282" if balance >= 0 else "#97266d"

        cards = [
            ("Total Income", format_amount(series.total_income), "#c6f6d5", "#22543d"),
            ("Total Expense", format_amount(series.total_expense), "#fed7d7", "#742a2a"),
            ("Net Balance", format_amount(balance), balance_bg, balance_fg),
        ]
        card_html = "".join(
            f'<div style="text-align: center; padding: 12px; background: {bg}; '
            f'border-radius: 8px; flex: 1;">'
            f'<div style="color: {fg}; font-size: 14px; font-weight: 600;">{label}</div>'
            f'<div style="color: {fg}; font-size: 24px; font-weight: 700; '
            f'margin-top: 4px;">{value}</div></div>'
            for label, value, bg, fg in cards
        )

        return (
            f'<div style="{CONTAINER_STYLE}">'
            f'<div style="{CARD_STYLE}">'
            f'<h2 style="{TITLE_STYLE}">📈 Transaction Visualization</h2>'
            f'<div style="background: #f7fafc; padding: 16px; border-radius: 8px; '
            f'margin-bottom: 20px;">'
            f'<img alt="Transaction chart" style="width: 100%;" '
            f'src="data:image/{CHART_FORMAT};base64,{encoded}"/></div>'
            f'<div style="display: flex; gap: 16px; justify-content: center;">'
            f"{card_html}</div>"
            f"</div></div>"
        )

    def render_table_html(self, entries: list[Entry]) -> str:
        """
        Render entries as an HTML table.

        Args:
            entries: Entries in display order

        Returns:
            HTML string; cell values are escaped
        """
        if entries:
            df = pd.DataFrame(
                [
                    {
                        "ID": f"#{e.id}",
                        "Type": "💰 Income" if e.is_income else "💸 Expense",
                        "Amount": format_signed_amount(e),
                        "Category": e.category,
                        "Description": e.description or "—",
                        "Date": e.occurred_at.strftime("%Y-%m-%d"),
                    }
                    for e in entries
                ]
            )
            table = df.to_html(index=False, escape=True, border=0, classes="txn-table")
            count = len(entries)
            footer = (
                '<div style="margin-top: 16px; padding-top: 16px; '
                "border-top: 1px solid #e2e8f0; color: #718096; font-size: 14px; "
                f'text-align: right;">Total: {count} '
                f"transaction{'s' if count != 1 else ''}</div>"
            )
        else:
            table = (
                '<div style="padding: 40px; text-align: center; color: #a0aec0; '
                'font-size: 16px;"><div>📭</div>'
                '<div style="margin-top: 8px;">No transactions found</div></div>'
            )
            footer = ""

        return (
            f"{TABLE_CSS}"
            f'<div style="{CONTAINER_STYLE}">'
            f'<div style="{CARD_STYLE}">'
            f'<h2 style="{TITLE_STYLE}">📊 Transaction List</h2>'
            f'<div style="overflow-x: auto;">{table}</div>'
            f"{footer}"
            f"</div></div>"
        )
