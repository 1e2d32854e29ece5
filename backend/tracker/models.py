# backend/tracker/models.py
from django.contrib.auth.models import User
from django.db import models
from django.utils import timezone


class ProblemRecord(models.Model):
    """
    Everything one user tracks about one problem: solve status, metadata copied
    from the problem table, notes, bookmark and revision-queue flags.
    """

    class Difficulty(models.TextChoices):
        EASY = "Easy", "Easy"
        MEDIUM = "Medium", "Medium"
        HARD = "Hard", "Hard"

    user = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="problem_records"
    )
    # The problem identifier used by the problem table, e.g. "two-sum"
    problem_id = models.CharField(max_length=255)
    title = models.CharField(max_length=255)
    difficulty = models.CharField(max_length=10, choices=Difficulty.choices)
    company = models.CharField(max_length=100)
    duration = models.CharField(max_length=50)  # "30days", "6months", "all", ...
    leetcode_link = models.URLField(max_length=255, blank=True, default="")

    notes = models.TextField(blank=True, default="")
    attempted = models.BooleanField(default=True)
    in_revision_queue = models.BooleanField(default=False)
    next_review = models.DateTimeField(null=True, blank=True)
    is_bookmarked = models.BooleanField(default=False)
    time_spent = models.PositiveIntegerField(default=0)  # minutes

    solved_at = models.DateTimeField(default=timezone.now)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["user", "problem_id"], name="unique_record_per_user_problem"
            )
        ]
        indexes = [
            models.Index(fields=["user", "-solved_at"], name="record_user_solved_idx"),
            models.Index(fields=["user", "company"], name="record_user_company_idx"),
            models.Index(
                fields=["user", "difficulty"], name="record_user_difficulty_idx"
            ),
        ]
        ordering = ["-solved_at"]

    def __str__(self):
        return f"{self.user.username} - {self.title} ({self.difficulty})"


class CodeSnippet(models.Model):
    record = models.ForeignKey(
        ProblemRecord, on_delete=models.CASCADE, related_name="code_snippets"
    )
    title = models.CharField(max_length=255, default="Solution")
    language = models.CharField(max_length=50, default="javascript")
    code = models.TextField(blank=True, default="")
    created_at = models.DateTimeField(default=timezone.now)

    class Meta:
        # Insertion order; the id breaks ties between snippets added in the same instant
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.title} ({self.language})"
