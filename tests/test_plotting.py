import pytest

from models import Summary, Window
from utils.plotting import ChartError, generate_category_chart, summary_to_frame

SUMMARY = Summary(window=Window.MONTH, total=39.75, by_category={"Food": 19.75, "Transport": 20.0})


def test_summary_to_frame():
    frame = summary_to_frame(SUMMARY)
    assert list(frame.columns) == ["category", "total"]
    assert frame["total"].sum() == 39.75


@pytest.mark.parametrize("chart_type", ["pie", "bar"])
def test_generate_category_chart_returns_png(chart_type):
    buffer = generate_category_chart(SUMMARY, chart_type)
    assert buffer.read(8) == b"\x89PNG\r\n\x1a\n"


def test_empty_summary_cannot_be_charted():
    with pytest.raises(ChartError, match="no expenses"):
        generate_category_chart(Summary(window=Window.WEEK))


def test_unknown_chart_type():
    with pytest.raises(ChartError, match="Unsupported chart type"):
        generate_category_chart(SUMMARY, "line")
