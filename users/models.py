from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Custom User Model inheriting from AbstractUser for flexibility.

    Roles are expressed with auth Groups (Admin, Manager, Staff) created by
    the 0002 data migration; see apps.api.permissions.
    """

    name = models.CharField(max_length=255, blank=True)
    tenant = models.ForeignKey(
        'tenants.Tenant',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='users',
        help_text="Tenant this user belongs to (empty for platform superusers)"
    )

    def __str__(self):
        return self.name or self.username
