"""Tests for accounts models and RBAC logic."""

import pytest
from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied
from django.test import RequestFactory

from accounts.mixins import owned_by_user, role_required
from accounts.models import Role
from clients.models import Client

User = get_user_model()


@pytest.mark.django_db
class TestUserModel:
    def test_user_str_includes_role_display(self):
        user = User(username="test", first_name="Camille", last_name="Martin", role=Role.FACTURATION)
        assert "Facturation" in str(user)

    def test_default_role_is_exploitation(self, db):
        user = User.objects.create_user(username="newuser", password="pass")
        assert user.role == Role.EXPLOITATION

    def test_billing_roles_can_bill(self, admin_staff, billing_user):
        assert admin_staff.can_bill is True
        assert billing_user.can_bill is True

    def test_exploitation_cannot_bill(self, exploit_user):
        assert exploit_user.can_bill is False
        assert exploit_user.is_exploitation is True

    def test_superuser_is_never_restricted(self, db):
        root = User.objects.create_superuser(username="root", password="pass", email="root@example.com")
        assert root.is_exploitation is False
        assert root.can_bill is True

    def test_has_any_role(self, billing_user):
        assert billing_user.has_any_role(Role.FACTURATION, Role.ADMIN) is True
        assert billing_user.has_any_role(Role.EXPLOITATION) is False


@pytest.mark.django_db
class TestRoleRequired:
    def _call(self, user):
        @role_required(Role.FACTURATION)
        def view(request):
            return "ok"

        request = RequestFactory().get("/")
        request.user = user
        return view(request)

    def test_matching_role_passes(self, billing_user):
        assert self._call(billing_user) == "ok"

    def test_admin_always_passes(self, admin_staff):
        assert self._call(admin_staff) == "ok"

    def test_other_role_is_denied(self, exploit_user):
        with pytest.raises(PermissionDenied):
            self._call(exploit_user)


@pytest.mark.django_db
class TestOwnedByUser:
    def test_exploitation_sees_only_own_rows(self, exploit_user, billing_user):
        mine = Client.objects.create(nom="Mine", created_by=exploit_user)
        Client.objects.create(nom="Not mine", created_by=billing_user)
        assert list(owned_by_user(Client.objects.all(), exploit_user)) == [mine]

    def test_other_roles_see_everything(self, exploit_user, billing_user):
        Client.objects.create(nom="Mine", created_by=exploit_user)
        Client.objects.create(nom="Not mine", created_by=billing_user)
        assert owned_by_user(Client.objects.all(), billing_user).count() == 2
