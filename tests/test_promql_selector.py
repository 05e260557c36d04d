from promdash.promql.models import QuerySuggestion
from promdash.promql.selector import DEFAULT_QUERY, get_best_query


def test_first_suggestion_wins():
    suggestions = [
        QuerySuggestion(query="rate(x_total[5m])", description="rate"),
        QuerySuggestion(query="increase(x_total[1h])", description="increase"),
    ]
    assert get_best_query(suggestions) is suggestions[0]


def test_empty_list_returns_up_query():
    best = get_best_query([])

    assert best == DEFAULT_QUERY
    assert best.query == "up"
    assert best.description == "Default query"
    assert best.visualization_type == "timeseries"
    assert best.y_axis_label == "value"
