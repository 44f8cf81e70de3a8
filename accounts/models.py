"""
Custom User model with role-based access control.

Three roles, one per user:
- admin: full access, user management.
- exploitation: operations staff; creates slips and quotes, sees only
  their own records, may not issue invoices or credit notes.
- facturation: billing staff; issues and tracks all billing documents.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models


class Role(models.TextChoices):
    ADMIN = "admin", "Administrateur"
    EXPLOITATION = "exploitation", "Exploitation"
    FACTURATION = "facturation", "Facturation"


# Roles allowed to issue and manage invoices / credit notes
BILLING_ROLES = (Role.ADMIN, Role.FACTURATION)


class User(AbstractUser):
    """Extended user with a single primary role for RBAC."""

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.EXPLOITATION,
        verbose_name="Rôle",
    )
    phone_number = models.CharField(max_length=20, blank=True, verbose_name="Téléphone")
    email_signature = models.TextField(blank=True, verbose_name="Signature e-mail")

    class Meta:
        verbose_name = "Utilisateur"
        verbose_name_plural = "Utilisateurs"

    def __str__(self):
        return f"{self.get_full_name() or self.username} ({self.get_role_display()})"

    @property
    def is_admin_role(self):
        return self.role == Role.ADMIN or self.is_superuser

    @property
    def is_exploitation(self):
        return self.role == Role.EXPLOITATION and not self.is_superuser

    @property
    def can_bill(self):
        return self.is_superuser or self.role in BILLING_ROLES

    def has_any_role(self, *roles):
        """Check if user has one of the given roles."""
        return self.role in roles
