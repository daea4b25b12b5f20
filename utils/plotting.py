from io import BytesIO

import matplotlib.figure
import matplotlib.pyplot as plt
import pandas as pd

from models import Summary
from utils.logging import logger


class ChartError(ValueError):
    """Custom exception for chart-related errors."""

    def __init__(self, message: str = None, original_error: Exception = None):
        """Initialize a chart error.

        Args:
            message: Optional error message
            original_error: Original exception that caused this error
        """
        if message is None:
            message = "An error occurred in chart generation"
        super().__init__(message)
        self.original_error = original_error

    @classmethod
    def no_data(cls):
        return cls("There are no expenses to chart")

    @classmethod
    def unsupported_chart_type(cls, chart_type: str):
        return cls(f"Unsupported chart type: {chart_type}")

    @classmethod
    def from_exception(cls, error: Exception):
        return cls(f"Failed to generate chart: {error!s}", error)


def summary_to_frame(summary: Summary) -> pd.DataFrame:
    """Turn the per-category totals into a DataFrame with 'category' and 'total' columns."""
    return pd.DataFrame(
        [{"category": cat, "total": total} for cat, total in summary.by_category.items()],
        columns=["category", "total"],
    )


class ChartGenerator:
    """Class for drawing spending per category."""

    def __init__(
        self,
        data: pd.DataFrame,
        title: str,
        figsize: tuple[float, float] = (10, 8),
        dpi: int = 150,
    ):
        self.data = data.sort_values(by="total", ascending=False).copy()
        self.title = title
        self.total_spending = data["total"].sum()
        self.figsize = figsize
        self.dpi = dpi
        self.figure: matplotlib.figure.Figure | None = None

    def create_bar_chart(self) -> matplotlib.figure.Figure:
        self.figure = plt.figure(figsize=self.figsize)
        bars = plt.bar(
            self.data["category"], self.data["total"], color=plt.cm.Paired(range(len(self.data)))
        )

        for bar, total in zip(bars, self.data["total"]):
            percentage = (total / self.total_spending) * 100
            plt.text(
                bar.get_x() + bar.get_width() / 2,
                bar.get_height(),
                f"${total:.2f}\n({percentage:.1f}%)",
                ha="center",
                va="bottom",
                fontsize=10,
            )

        plt.grid(axis="y", linestyle="--", alpha=0.7)
        plt.xlabel("Category", fontsize=12)
        plt.ylabel("Total Spending ($)", fontsize=12)
        plt.title(f"{self.title}\nTotal: ${self.total_spending:.2f}", fontsize=14)
        plt.xticks(rotation=45, ha="right", fontsize=10)
        plt.tight_layout()
        return self.figure

    def create_pie_chart(self) -> matplotlib.figure.Figure:
        self.figure = plt.figure(figsize=self.figsize)
        plt.pie(
            self.data["total"],
            labels=self.data["category"],
            autopct=lambda p: f"{p:.1f}%\n(${(p * self.total_spending / 100):.2f})",
            startangle=140,
            colors=plt.cm.Paired(range(len(self.data))),
        )
        plt.title(f"{self.title}\nTotal: ${self.total_spending:.2f}", fontsize=14)
        plt.axis("equal")  # Equal aspect ratio ensures the pie chart is circular
        return self.figure

    def save_chart_to_buffer(self) -> BytesIO:
        buf = BytesIO()
        self.figure.savefig(buf, format="png", dpi=self.dpi, bbox_inches="tight")
        buf.seek(0)
        return buf

    def close(self) -> None:
        """Close the current figure to free memory."""
        if self.figure is not None:
            plt.close(self.figure)
            self.figure = None


def generate_category_chart(summary: Summary, chart_type: str = "pie") -> BytesIO:
    """Draw the per-category totals of a summary.

    Args:
        summary: Summary of the selected window
        chart_type: 'pie' or 'bar'

    Returns:
        BytesIO object containing the chart in PNG format

    Raises:
        ChartError: If the summary is empty, the chart type is unknown or drawing fails
    """
    if chart_type not in ("bar", "pie"):
        raise ChartError.unsupported_chart_type(chart_type)
    if summary.is_empty:
        raise ChartError.no_data()

    logger.info(f"Generating {chart_type} chart for window {summary.window.value}")
    chart_generator = ChartGenerator(
        summary_to_frame(summary), title=f"Spending by Category ({summary.window.label})"
    )
    try:
        if chart_type == "bar":
            chart_generator.create_bar_chart()
        else:
            chart_generator.create_pie_chart()
        buf = chart_generator.save_chart_to_buffer()
    except Exception as e:
        logger.error(f"Error generating {chart_type} chart: {e}")
        raise ChartError.from_exception(e) from e
    finally:
        chart_generator.close()

    logger.debug("Successfully generated chart")
    return buf
