import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="ProblemRecord",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("problem_id", models.CharField(max_length=255)),
                ("title", models.CharField(max_length=255)),
                (
                    "difficulty",
                    models.CharField(
                        choices=[("Easy", "Easy"), ("Medium", "Medium"), ("Hard", "Hard")],
                        max_length=10,
                    ),
                ),
                ("company", models.CharField(max_length=100)),
                ("duration", models.CharField(max_length=50)),
                (
                    "leetcode_link",
                    models.URLField(blank=True, default="", max_length=255),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("attempted", models.BooleanField(default=True)),
                ("in_revision_queue", models.BooleanField(default=False)),
                ("next_review", models.DateTimeField(blank=True, null=True)),
                ("is_bookmarked", models.BooleanField(default=False)),
                ("time_spent", models.PositiveIntegerField(default=0)),
                (
                    "solved_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="problem_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-solved_at"],
                "indexes": [
                    models.Index(
                        fields=["user", "-solved_at"], name="record_user_solved_idx"
                    ),
                    models.Index(
                        fields=["user", "company"], name="record_user_company_idx"
                    ),
                    models.Index(
                        fields=["user", "difficulty"],
                        name="record_user_difficulty_idx",
                    ),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("user", "problem_id"),
                        name="unique_record_per_user_problem",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="CodeSnippet",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True,
                        primary_key=True,
                        serialize=False,
                        verbose_name="ID",
                    ),
                ),
                ("title", models.CharField(default="Solution", max_length=255)),
                ("language", models.CharField(default="javascript", max_length=50)),
                ("code", models.TextField(blank=True, default="")),
                (
                    "created_at",
                    models.DateTimeField(default=django.utils.timezone.now),
                ),
                (
                    "record",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="code_snippets",
                        to="tracker.problemrecord",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at", "id"],
            },
        ),
    ]
