from datetime import date, datetime
from decimal import Decimal

from django.conf import settings
from django.core.paginator import Paginator


def clean_params(params):
    """
    Turn a filter mapping into API query parameters.

    Keys whose value is None, an empty string or an empty list are dropped.
    Booleans become "true"/"false" and dates their ISO form, so the API sees
    the same strings a browser query would carry.

    Args:
        params: dict of filter values (may be None)

    Returns:
        dict: query parameters ready for the HTTP client
    """
    cleaned = {}
    for key, value in (params or {}).items():
        if value is None or value == '' or value == []:
            continue
        if isinstance(value, bool):
            cleaned[key] = 'true' if value else 'false'
        elif isinstance(value, (date, datetime)):
            cleaned[key] = value.isoformat()
        elif isinstance(value, Decimal):
            cleaned[key] = str(value)
        else:
            cleaned[key] = value
    return cleaned


def compact(payload, clear_blank=False):
    """
    Recursively drop None and empty-string values from a request payload.

    With clear_blank the blanks are sent as None instead, so an update
    clears fields the user emptied.
    """
    if isinstance(payload, dict):
        result = {}
        for key, value in payload.items():
            value = compact(value, clear_blank)
            if value is None or value == '':
                if clear_blank:
                    result[key] = None
                continue
            if isinstance(value, dict) and not value:
                continue
            result[key] = value
        return result
    if isinstance(payload, list):
        return [compact(item) for item in payload]
    return payload


def resolve(item, path):
    """Follow a dotted path ("guest.full_name") through nested dicts."""
    value = item
    for part in path.split('.'):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def search(items, query, fields):
    """
    Keep the items whose fields contain the query, ignoring case.

    Args:
        items: list of dicts as returned by the API
        query: free text typed by the user; blank keeps everything
        fields: dotted paths checked in order, any match keeps the item

    Returns:
        list: matching items in their original order
    """
    query = (query or '').strip().lower()
    if not query:
        return list(items)
    matches = []
    for item in items:
        for field in fields:
            value = resolve(item, field)
            if value is not None and query in str(value).lower():
                matches.append(item)
                break
    return matches


def match_choice(value, selected):
    """A select filter set to "all" (or left blank) matches any value."""
    if selected in (None, '', 'all'):
        return True
    return value == selected


def sort_by_number(items, field, direction):
    """Sort by a numeric field; any direction other than asc/desc keeps the order."""
    if direction not in ('asc', 'desc'):
        return list(items)
    return sorted(items, key=lambda item: _number(resolve(item, field)), reverse=direction == 'desc')


def paginate(request, items, per_page=None):
    """Paginate an already-filtered list the same way every listing does."""
    paginator = Paginator(items, per_page or settings.BACKOFFICE_PAGE_SIZE)
    return paginator.get_page(request.GET.get('page'))


def query_filters(request, keys):
    """Collect the listed GET parameters, stripped, skipping blanks."""
    filters = {}
    for key in keys:
        value = request.GET.get(key, '').strip()
        if value:
            filters[key] = value
    return filters


def _number(value):
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0
