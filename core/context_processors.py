from django.conf import settings

from .auth import current_hotel_id, current_user, is_admin


def backoffice(request):
    user = current_user(request) if hasattr(request, 'session') else None
    return {
        'current_user': user,
        'current_hotel_id': current_hotel_id(request) if user else None,
        'is_admin': is_admin(user),
        'hotel_name': settings.BACKOFFICE_HOTEL_NAME,
    }
