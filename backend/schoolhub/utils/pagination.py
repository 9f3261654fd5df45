from math import ceil
from sqlalchemy import or_, String, cast

DEFAULT_PER_PAGE = 10


def apply_pagination_and_search(query, model, search_term, search_columns, page=1, per_page=DEFAULT_PER_PAGE):
    """
    Applies search filtering and pagination to a SQLAlchemy query.

    Args:
      query: base SQLAlchemy query
      model: SQLAlchemy model class
      search_term: string to search for
      search_columns: column names on `model` or column expressions
      page: int, current page number
      per_page: int, number of items per page

    Returns:
      Pagination object with .items, .total, .page, .pages etc.
    """
    if search_term:
        search_filters = []
        for col in search_columns:
            column = getattr(model, col) if isinstance(col, str) else col
            search_filters.append(cast(column, String).ilike(f"%{search_term}%"))
        query = query.filter(or_(*search_filters))

    page = page if page and page > 0 else 1
    per_page = per_page if per_page and per_page > 0 else DEFAULT_PER_PAGE

    return query.paginate(page=page, per_page=per_page, error_out=False)


def pagination_meta(paginated):
    return {
        "total": paginated.total,
        "page": paginated.page,
        "limit": paginated.per_page,
        "total_pages": ceil(paginated.total / paginated.per_page) if paginated.per_page else 0,
    }
