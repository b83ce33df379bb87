"""Initial migration for contacts app - Contact model and its query indexes."""

import uuid

from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Contact",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4,
                        editable=False,
                        primary_key=True,
                        serialize=False,
                    ),
                ),
                ("name", models.CharField(max_length=100)),
                ("email", models.EmailField(db_index=True, max_length=254)),
                ("message", models.TextField(max_length=1000)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True, protocol="IPv4")),
                ("read", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "contact",
                "verbose_name_plural": "contacts",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="contact_created_desc_idx"),
                    models.Index(fields=["read", "-created_at"], name="contact_read_created_idx"),
                    models.Index(fields=["email", "-created_at"], name="contact_email_created_idx"),
                ],
            },
        ),
    ]
