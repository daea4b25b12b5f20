from conftest import make_expense

from utils.aggregation import aggregate


def test_aggregate_totals_per_category():
    records = [
        make_expense(1, 12.50, "Food"),
        make_expense(2, 7.25, "Food"),
        make_expense(3, 20.00, "Transport"),
    ]
    result = aggregate(records)
    assert result.total == 39.75
    assert result.by_category == {"Food": 19.75, "Transport": 20.00}


def test_aggregate_empty_input():
    result = aggregate([])
    assert result.total == 0
    assert result.by_category == {}


def test_categories_keep_order_of_first_appearance():
    records = [
        make_expense(1, 1.0, "Transport"),
        make_expense(2, 1.0, "Food"),
        make_expense(3, 1.0, "Transport"),
        make_expense(4, 1.0, "Books"),
    ]
    assert list(aggregate(records).by_category) == ["Transport", "Food", "Books"]


def test_category_casing_creates_separate_buckets():
    records = [make_expense(1, 5.0, "Food"), make_expense(2, 3.0, "food")]
    assert aggregate(records).by_category == {"Food": 5.0, "food": 3.0}


def test_blank_category_goes_to_uncategorized():
    records = [make_expense(1, 4.0, ""), make_expense(2, 6.0, "Food")]
    assert aggregate(records).by_category == {"Uncategorized": 4.0, "Food": 6.0}


def test_aggregate_is_repeatable_and_leaves_input_alone():
    records = [make_expense(1, 2.5, "Food"), make_expense(2, 1.5, "Fun")]
    snapshot = list(records)
    first = aggregate(records)
    second = aggregate(records)
    assert first == second
    assert records == snapshot


def test_aggregate_accepts_generators():
    result = aggregate(make_expense(i, 1.0, "Food") for i in range(3))
    assert result.total == 3.0
