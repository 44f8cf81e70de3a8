from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from unfold.admin import ModelAdmin
from unfold.decorators import display
from unfold.forms import AdminPasswordChangeForm, UserChangeForm, UserCreationForm

from .models import Role, User


@admin.register(User)
class UserAdmin(ModelAdmin, BaseUserAdmin):
    form = UserChangeForm
    add_form = UserCreationForm
    change_password_form = AdminPasswordChangeForm

    list_display = ("username", "get_full_name", "email", "role_badge", "is_active", "last_login")
    list_filter = ("role", "is_active")
    search_fields = ("username", "first_name", "last_name", "email", "phone_number")
    ordering = ("username",)

    fieldsets = (
        (None, {"fields": ("username", "password")}),
        ("Identité", {"fields": ("first_name", "last_name", "email", "phone_number", "email_signature")}),
        ("Accès", {"fields": ("role", "is_active", "is_staff", "is_superuser")}),
        ("Historique", {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (None, {"fields": ("username", "password1", "password2")}),
        ("Accès", {"fields": ("role", "email", "phone_number")}),
    )
    readonly_fields = ("last_login", "date_joined")

    @display(
        description="Rôle",
        label={
            Role.ADMIN.label: "danger",
            Role.FACTURATION.label: "success",
            Role.EXPLOITATION.label: "info",
        },
    )
    def role_badge(self, obj):
        return obj.get_role_display()
