from django import template
from django.utils.html import format_html

from core import badges
from core.filters import resolve
from core.formatting import format_currency, format_date, format_price

register = template.Library()


def _render(info):
    if info['icon']:
        return format_html(
            '<span class="badge badge-{}" data-icon="{}">{}</span>',
            info['variant'], info['icon'], info['label'],
        )
    return format_html('<span class="badge badge-{}">{}</span>', info['variant'], info['label'])


@register.filter
def status_badge(value):
    if not value:
        return ''
    return _render(badges.badge(value))


@register.filter
def category_badge(value):
    if not value:
        return ''
    return _render(badges.category_badge(value))


@register.filter
def currency(value, code='USD'):
    return format_currency(value, code or 'USD')


@register.filter
def amount(item, path):
    """Amount at path, in the currency the record carries (USD when it has none)."""
    if not isinstance(item, dict):
        return format_currency(None)
    return format_currency(resolve(item, path), item.get('currency') or 'USD')


@register.filter
def service_price(service):
    if not isinstance(service, dict):
        return ''
    return format_price(service.get('price'), service.get('priceType'))


@register.filter
def api_date(value, fmt='%b %d, %Y'):
    return format_date(value, fmt)


@register.filter
def api_datetime(value):
    return format_date(value, '%b %d, %Y %H:%M')


@register.filter
def field(item, path):
    """Dotted lookup for API dicts whose keys templates cannot reach, like "_id"."""
    return resolve(item, path)


@register.filter
def item_id(item):
    if not isinstance(item, dict):
        return ''
    return item.get('_id') or item.get('id') or ''


@register.simple_tag(takes_context=True)
def query_with(context, **kwargs):
    """Current query string with some parameters replaced, for pagination links."""
    params = context['request'].GET.copy()
    for key, value in kwargs.items():
        params[key] = value
    return params.urlencode()
