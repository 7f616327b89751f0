"""
Badge styling for the statuses the API reports.

Every screen that shows a status goes through badge() so a booking, an
invoice or a room in the same state looks the same everywhere.
"""

DEFAULT_VARIANT = 'outline'
DEFAULT_ICON = 'clock'

# status -> (variant, icon)
STATUS_BADGES = {
    # Bookings
    'confirmed': ('info', 'check-circle'),
    'checked_in': ('success', 'log-in'),
    'checked_out': ('muted', 'log-out'),
    'no_show': ('warning', 'user-x'),
    # Payments and invoices
    'pending': ('info', 'clock'),
    'partial': ('info', 'clock'),
    'paid': ('success', 'check-circle'),
    'partially_paid': ('info', 'clock'),
    'refunded': ('muted', 'rotate-ccw'),
    'partially_refunded': ('muted', 'rotate-ccw'),
    'failed': ('danger', 'x-circle'),
    'draft': ('muted', 'file'),
    'issued': ('warning', 'send'),
    'overdue': ('orange', 'alert-triangle'),
    # Order-like workflow
    'preparing': ('warning', 'clock'),
    'ready': ('success', 'check-circle'),
    'served': ('purple', 'check-circle'),
    'completed': ('muted', 'check-circle'),
    'cancelled': ('danger', 'x-circle'),
    # Rooms
    'available': ('success', 'check-circle'),
    'occupied': ('danger', 'users'),
    'reserved': ('info', 'clock'),
    'cleaning': ('warning', 'alert-triangle'),
    'maintenance': ('muted', 'x-circle'),
    'out_of_order': ('danger', 'x-circle'),
    # Priorities
    'high': ('danger', 'alert-triangle'),
    'medium': ('warning', 'clock'),
    'low': ('success', 'check-circle'),
    # General
    'active': ('success', 'eye'),
    'inactive': ('muted', 'eye-off'),
    'seasonal': ('orange', 'sun'),
    'featured': ('amber', 'star'),
    'in_progress': ('warning', 'loader'),
    'success': ('success', 'check-circle'),
}

CATEGORY_VARIANTS = {
    'catering': 'amber',
    'decoration': 'pink',
    'equipment': 'info',
    'entertainment': 'purple',
    'staffing': 'indigo',
    'photography': 'emerald',
    'transportation': 'sky',
    'security': 'danger',
    'cleaning': 'teal',
    'other': 'muted',
}


def normalize(status):
    """'Partially Paid', 'partially-paid' and 'partially_paid' all look up the same entry."""
    return str(status or '').strip().lower().replace(' ', '_').replace('-', '_')


def label(status):
    text = str(status or '').replace('_', ' ').strip()
    if not text:
        return ''
    return text[0].upper() + text[1:]


def badge(status):
    """
    Badge description for a status.

    Returns:
        dict: variant (CSS modifier), label (display text), icon (icon name)
    """
    variant, icon = STATUS_BADGES.get(normalize(status), (DEFAULT_VARIANT, DEFAULT_ICON))
    return {'variant': variant, 'label': label(status), 'icon': icon}


def category_badge(category):
    return {
        'variant': CATEGORY_VARIANTS.get(normalize(category), 'muted'),
        'label': label(category),
        'icon': None,
    }
