"""
Page-number pagination for cached public responses.

DRF paginators build their output from the live request, which cannot be
cached; this returns a plain dict instead.
"""

from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator

from apps.core.exceptions import NotFoundError


def paginate_page(queryset, page_number, serializer_class, per_page):
    """Serialize one page of queryset; out-of-range pages are 404."""
    paginator = Paginator(queryset, per_page)
    try:
        page = paginator.page(page_number or 1)
    except PageNotAnInteger:
        page = paginator.page(1)
    except EmptyPage:
        raise NotFoundError(message="Page not found", field='page')

    return {
        'count': paginator.count,
        'page': page.number,
        'num_pages': paginator.num_pages,
        'has_next': page.has_next(),
        'has_previous': page.has_previous(),
        'results': serializer_class(page.object_list, many=True).data,
    }


def page_number_param(request, param='page') -> int:
    """
    Resolved page number from the query string.

    Anything that is not an integer reads as page 1, so '?page=01' and
    '?page=x' share the cache entry of '?page=1'.
    """
    try:
        return int(request.query_params.get(param, 1))
    except (TypeError, ValueError):
        return 1
