# backend/tracker/admin.py
from django.contrib import admin

from .models import CodeSnippet, ProblemRecord


class CodeSnippetInline(admin.TabularInline):
    model = CodeSnippet
    extra = 0


@admin.register(ProblemRecord)
class ProblemRecordAdmin(admin.ModelAdmin):
    list_display = ["problem_id", "title", "user", "difficulty", "company", "solved_at"]
    list_filter = ["difficulty", "is_bookmarked", "in_revision_queue"]
    search_fields = ["problem_id", "title", "company", "user__username"]
    inlines = [CodeSnippetInline]
