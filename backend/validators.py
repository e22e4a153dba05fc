"""Input validation for API endpoints"""
from typing import Any, Dict, Mapping

MAX_PAGE_SIZE = 500
SORT_DIRECTIONS = {'asc': True, 'desc': False}
TRUTHY = {'1', 'true', 'yes', 'on'}


class ValidationError(Exception):
    """Custom validation error"""
    pass


def _parse_int(value: str, name: str, errors: list):
    try:
        return int(value)
    except (TypeError, ValueError):
        errors.append(f'{name} must be an integer')
        return None


def validate_dashboard_query(args: Mapping[str, str], default_page_size: int = 25) -> Dict[str, Any]:
    """Validate dashboard query parameters (sheet, q, sort, page, page_size, compact)"""
    errors = []

    query = {
        'sheet': (args.get('sheet') or '').strip() or None,
        'keyword': args.get('q') or '',
        'ascending': None,
        'page': 1,
        'page_size': default_page_size,
        'compact': str(args.get('compact', '')).strip().lower() in TRUTHY,
    }

    sort = (args.get('sort') or '').strip().lower()
    if sort:
        if sort not in SORT_DIRECTIONS:
            errors.append('sort must be "asc" or "desc"')
        else:
            query['ascending'] = SORT_DIRECTIONS[sort]

    if args.get('page'):
        page = _parse_int(args.get('page'), 'page', errors)
        if page is not None:
            query['page'] = page

    if args.get('page_size'):
        page_size = _parse_int(args.get('page_size'), 'page_size', errors)
        if page_size is not None:
            if page_size < 1 or page_size > MAX_PAGE_SIZE:
                errors.append(f'page_size must be between 1 and {MAX_PAGE_SIZE}')
            else:
                query['page_size'] = page_size

    if errors:
        raise ValidationError('; '.join(errors))

    return query
