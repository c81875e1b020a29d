"""Search criteria expansion"""

from linkedin_autoapply.models import SearchFilters, SearchQuery


def expand_search_criteria(criteria):
    """
    Every keyword × location × filter combination, in configuration order.

    An empty filter list counts as one default filter set, so the result has
    len(keywords) * len(locations) * max(1, len(filters)) queries.
    """
    filters = criteria.filters or (SearchFilters(),)
    return [
        SearchQuery(keyword=keyword, location=location, filters=filter_set)
        for keyword in criteria.keywords
        for location in criteria.locations
        for filter_set in filters
    ]
