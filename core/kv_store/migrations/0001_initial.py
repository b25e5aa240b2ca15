from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="KeyValueEntry",
            fields=[
                ("key", models.CharField(max_length=128, primary_key=True, serialize=False)),
                ("value", models.JSONField(null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "pos_kv_entries",
                "ordering": ["key"],
            },
        ),
    ]
