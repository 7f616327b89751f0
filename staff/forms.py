from django import forms

from core.filters import compact
from .services import USER_STATUSES


def _role_choices(roles):
    return [('', '-- Select a role --')] + [(role.get('_id'), role.get('name')) for role in roles]


class UserForm(forms.Form):
    """Staff account; the password is only asked for when the account is created."""
    full_name = forms.CharField(max_length=150)
    email = forms.EmailField()
    password = forms.CharField(min_length=8, widget=forms.PasswordInput)
    role = forms.ChoiceField()
    status = forms.ChoiceField(choices=USER_STATUSES, initial='active')

    def __init__(self, *args, **kwargs):
        roles = kwargs.pop('roles', [])
        editing = kwargs.pop('editing', False)
        super().__init__(*args, **kwargs)
        self.fields['role'].choices = _role_choices(roles)
        if editing:
            del self.fields['password']

    def to_payload(self):
        return compact(dict(self.cleaned_data))


def initial_from_user(user):
    role = user.get('role')
    return {
        'full_name': user.get('full_name'),
        'email': user.get('email'),
        'role': role.get('_id') if isinstance(role, dict) else role,
        'status': user.get('status') or 'active',
    }


class UserPasswordResetForm(forms.Form):
    new_password = forms.CharField(min_length=8, widget=forms.PasswordInput)
    confirm_password = forms.CharField(widget=forms.PasswordInput)

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('new_password') and cleaned_data.get('new_password') != cleaned_data.get('confirm_password'):
            raise forms.ValidationError('Passwords do not match.')
        return cleaned_data


class RoleForm(forms.Form):
    name = forms.CharField(max_length=80)
    description = forms.CharField(required=False, widget=forms.Textarea(attrs={'rows': 2}))
    permissions = forms.MultipleChoiceField(required=False, widget=forms.CheckboxSelectMultiple)

    def __init__(self, *args, **kwargs):
        permissions = kwargs.pop('permissions', [])
        super().__init__(*args, **kwargs)
        self.fields['permissions'].choices = [
            (p.get('_id'), f"{p.get('key')}: {p.get('description')}" if p.get('description') else p.get('key'))
            for p in permissions
        ]

    def to_payload(self):
        cd = self.cleaned_data
        return {'name': cd['name'], 'description': cd['description'], 'permissions': cd['permissions']}


def initial_from_role(role):
    return {
        'name': role.get('name'),
        'description': role.get('description'),
        'permissions': [p.get('_id') if isinstance(p, dict) else p for p in role.get('permissions') or []],
    }


class PermissionForm(forms.Form):
    key = forms.RegexField(
        regex=r'^[a-z0-9_]+(\.[a-z0-9_]+)+$', max_length=120,
        help_text='Dotted lowercase key, e.g. invoice.manage',
        error_messages={'invalid': 'Use a dotted lowercase key such as "invoice.manage".'},
    )
    description = forms.CharField(max_length=200, required=False)
