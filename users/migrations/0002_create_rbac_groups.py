# users/migrations/0002_create_rbac_groups.py
"""Create initial RBAC groups with permissions."""
from django.db import migrations


def create_groups(apps, schema_editor):
    Group = apps.get_model('auth', 'Group')
    Permission = apps.get_model('auth', 'Permission')

    # Permissions may not exist yet on a fresh database (they are created
    # post-migrate); groups are still created so role checks work.
    groups_config = {
        'Admin': None,  # Gets all permissions
        'Manager': [
            'view_client', 'add_client', 'change_client', 'delete_client',
            'view_vehicle', 'add_vehicle', 'change_vehicle', 'delete_vehicle',
            'view_invoice', 'add_invoice', 'change_invoice',
            'view_payment', 'add_payment',
            'view_reminder', 'add_reminder',
        ],
        'Staff': [
            'view_client', 'add_client', 'change_client',
            'view_vehicle', 'add_vehicle', 'change_vehicle',
            'view_invoice', 'add_invoice',
            'view_payment', 'add_payment',
            'view_reminder', 'add_reminder',
        ],
    }

    for group_name, codenames in groups_config.items():
        group, _ = Group.objects.get_or_create(name=group_name)

        if codenames is None:
            group.permissions.set(Permission.objects.all())
        else:
            perms = Permission.objects.filter(codename__in=codenames)
            group.permissions.set(perms)


def remove_groups(apps, schema_editor):
    Group = apps.get_model('auth', 'Group')
    Group.objects.filter(name__in=['Admin', 'Manager', 'Staff']).delete()


class Migration(migrations.Migration):
    dependencies = [
        ('users', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_groups, remove_groups),
    ]
