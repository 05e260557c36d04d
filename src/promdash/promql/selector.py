"""Selection of the best query suggestion."""

from typing import Sequence

from .models import QuerySuggestion

DEFAULT_QUERY = QuerySuggestion(
    query="up",
    description="Default query",
    visualization_type="timeseries",
    y_axis_label="value",
)


def get_best_query(suggestions: Sequence[QuerySuggestion]) -> QuerySuggestion:
    """
    Pick the suggestion to visualize.

    Generator ordering already puts the primary query first, so the first
    suggestion wins. An empty list yields a plain ``up`` query.
    """
    if not suggestions:
        return DEFAULT_QUERY
    return suggestions[0]
