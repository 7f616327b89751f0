from django.urls import reverse

from staff.forms import PermissionForm, UserForm
from staff.services import group_permissions
from .conftest import message_texts

ROLES = [{'_id': 'role-1', 'name': 'Front Desk'}, {'_id': 'role-2', 'name': 'Manager'}]
USER = {'_id': 'u7', 'full_name': 'Lee Night', 'email': 'lee@example.com', 'role': ROLES[0], 'status': 'active'}


def test_group_permissions_by_prefix():
    permissions = [
        {'key': 'invoice.view'},
        {'key': 'booking.manage'},
        {'key': 'invoice.manage'},
        {'key': ''},
    ]

    groups = group_permissions(permissions)

    assert [group for group, _ in groups] == ['booking', 'invoice', 'other']
    assert [p['key'] for p in dict(groups)['invoice']] == ['invoice.view', 'invoice.manage']


def test_permission_key_must_be_dotted():
    assert PermissionForm({'key': 'invoice.manage'}).is_valid()
    assert not PermissionForm({'key': 'Invoice Manage'}).is_valid()
    assert not PermissionForm({'key': 'invoice'}).is_valid()


def test_editing_a_user_drops_the_password():
    form = UserForm({'full_name': 'Lee Night', 'email': 'lee@example.com', 'role': 'role-2', 'status': 'active'},
                    roles=ROLES, editing=True)

    assert 'password' not in form.fields
    assert form.is_valid(), form.errors
    assert form.to_payload() == {'full_name': 'Lee Night', 'email': 'lee@example.com', 'role': 'role-2', 'status': 'active'}


def test_create_user(admin_client, fake_api):
    fake_api.add('GET', '/roles', {'data': ROLES})
    fake_api.add('POST', '/users', {'data': dict(USER, _id='u8')}, status=201)

    response = admin_client.post(reverse('staff:user_new'), {
        'full_name': 'Kim Day', 'email': 'kim@example.com', 'password': 'long-enough',
        'role': 'role-1', 'status': 'active',
    })

    assert response.url == reverse('staff:user_detail', args=['u8'])
    assert fake_api.last('POST', '/users')['json']['password'] == 'long-enough'
    assert 'User Kim Day created successfully' in message_texts(response)


def test_user_detail_shows_reach(admin_client, fake_api):
    fake_api.add('GET', '/users/u7', {'data': USER})
    fake_api.add('GET', '/users/u7/hotels/count', {'data': {'count': 3}})
    fake_api.add('GET', '/users/u7/chains', {'data': [{'chainCode': 'HV', 'name': 'Harbour Group', 'accessLevel': 'edit'}]})

    response = admin_client.get(reverse('staff:user_detail', args=['u7']))

    assert response.status_code == 200
    assert response.context['staff_user']['email'] == 'lee@example.com'
    assert response.context['hotel_count'] == 3
    assert 'Harbour Group' in response.content.decode()


def test_reset_password_needs_matching_confirmation(admin_client, fake_api):
    fake_api.add('GET', '/users/u7', {'data': USER})

    response = admin_client.post(reverse('staff:user_reset_password', args=['u7']), {
        'new_password': 'new-secret-1', 'confirm_password': 'new-secret-2',
    })

    assert response.status_code == 200
    assert 'Passwords do not match.' in response.content.decode()
    assert not fake_api.calls_to('POST', '/users/u7/reset-password')


def test_reset_password(admin_client, fake_api):
    fake_api.add('GET', '/users/u7', {'data': USER})
    fake_api.add('POST', '/users/u7/reset-password', {'success': True, 'message': 'Password reset'})

    response = admin_client.post(reverse('staff:user_reset_password', args=['u7']), {
        'new_password': 'new-secret-1', 'confirm_password': 'new-secret-1',
    })

    assert response.url == reverse('staff:user_detail', args=['u7'])
    assert fake_api.last('POST', '/users/u7/reset-password')['json'] == {'newPassword': 'new-secret-1'}
    assert 'Password reset successfully' in message_texts(response)


def test_role_carries_selected_permissions(admin_client, fake_api):
    fake_api.add('GET', '/permissions', {'data': [
        {'_id': 'p1', 'key': 'booking.view'}, {'_id': 'p2', 'key': 'invoice.manage', 'description': 'Edit invoices'},
    ]})
    fake_api.add('POST', '/roles', {'data': {'_id': 'role-3'}}, status=201)

    response = admin_client.post(reverse('staff:role_new'), {'name': 'Accounts', 'permissions': ['p2']})

    assert response.url == reverse('staff:role_list')
    assert fake_api.last('POST', '/roles')['json'] == {'name': 'Accounts', 'description': '', 'permissions': ['p2']}


def test_permission_list_groups(admin_client, fake_api):
    fake_api.add('GET', '/permissions', {'data': [
        {'_id': 'p1', 'key': 'booking.view'}, {'_id': 'p2', 'key': 'invoice.manage'},
    ]})

    response = admin_client.get(reverse('staff:permission_list'))

    assert [group for group, _ in response.context['groups']] == ['booking', 'invoice']


def test_staff_pages_are_admin_only(staff_client, fake_api):
    response = staff_client.get(reverse('staff:user_list'))

    assert response.url == reverse('reservations:dashboard')


def test_users_without_role_render(admin_client, fake_api):
    user = {key: value for key, value in USER.items() if key != 'role'}
    fake_api.add('GET', '/users', {'data': [user]})
    fake_api.add('GET', '/users/u7', {'data': user})
    fake_api.add('GET', '/users/u7/chains', {'data': [{'name': 'Unlisted chain', 'accessLevel': 'view'}]})

    listing = admin_client.get(reverse('staff:user_list'))
    detail = admin_client.get(reverse('staff:user_detail', args=['u7']))

    assert listing.status_code == 200
    assert 'Lee Night' in listing.content.decode()
    assert detail.status_code == 200
    assert 'Unlisted chain' in detail.content.decode()
