# backend/tracker/management/commands/import_records.py
import json
from datetime import datetime

import pytz
from django.contrib.auth.models import User
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction
from django.utils.dateparse import parse_datetime

from tracker import services
from tracker.exceptions import TrackerError


def parse_export_date(value):
    """
    Reads a date from the legacy export. Mongo's extended JSON wraps dates as
    {"$date": "..."}; plain ISO strings are accepted too. Naive values are UTC.
    """
    if isinstance(value, dict):
        value = value.get("$date")
    if not value:
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=pytz.UTC)
    parsed = parse_datetime(value)
    if parsed is None:
        raise CommandError(f"Unrecognized date: {value!r}")
    if parsed.tzinfo is None:
        parsed = pytz.UTC.localize(parsed)
    return parsed


class Command(BaseCommand):
    help = (
        "Imports a JSON export of legacy progress / solved-problem documents "
        "into one user's problem records"
    )

    def add_arguments(self, parser):
        parser.add_argument("username", help="Owner of the imported records")
        parser.add_argument("file", help="Path to the JSON export (a list of documents)")

    def handle(self, *args, **options):
        try:
            user = User.objects.get(username=options["username"])
        except User.DoesNotExist:
            raise CommandError(f"User not found: {options['username']}")

        self.stdout.write(f"Loading records from {options['file']}...")

        try:
            with open(options["file"], "r") as f:
                documents = json.load(f)
        except FileNotFoundError:
            raise CommandError(f"File not found: {options['file']}")
        except json.JSONDecodeError as e:
            raise CommandError(f"Invalid JSON in {options['file']}: {e}")

        records_created = 0
        records_updated = 0
        failures = 0

        for document in documents:
            problem_id = document.get("problemId")
            if not problem_id:
                self.stdout.write(self.style.WARNING("Skipping document without problemId"))
                failures += 1
                continue

            try:
                # One document is all or nothing
                with transaction.atomic():
                    created = self.import_document(user, problem_id, document)
            except TrackerError as e:
                self.stdout.write(
                    self.style.ERROR(f"Could not import {problem_id}: {e.detail}")
                )
                failures += 1
                continue

            if created:
                records_created += 1
            else:
                records_updated += 1

        self.stdout.write(
            self.style.SUCCESS(
                f"Import finished. "
                f"Created: {records_created}, Updated: {records_updated}, Failed: {failures}."
            )
        )

    def import_document(self, user, problem_id, document):
        meta = {
            # Solved-problem documents carry `title`, progress documents `problemTitle`
            "title": document.get("title") or document.get("problemTitle"),
            "difficulty": document.get("difficulty"),
            "company": document.get("company"),
            "duration": document.get("duration"),
            "leetcode_link": document.get("leetcodeLink"),
        }
        solved_at = parse_export_date(document.get("solvedAt") or document.get("dateSolved"))

        record, created = services.record_attempt(
            user,
            problem_id,
            {key: value for key, value in meta.items() if value},
            attempted=document.get("attempted", True),
            date_solved=solved_at,
            time_spent=document.get("timeSpent"),
        )

        if document.get("notes"):
            services.set_notes(user, problem_id, document["notes"])

        existing = {(s.title, s.code) for s in record.code_snippets.all()}
        for snippet in document.get("codeSnippets") or []:
            if (snippet.get("title") or "Solution", snippet.get("code") or "") in existing:
                continue
            services.add_snippet(user, problem_id, snippet)

        if document.get("isBookmarked") and not record.is_bookmarked:
            services.toggle_bookmark(user, problem_id)

        if document.get("inRevisionQueue"):
            services.toggle_revision_queue(
                user,
                problem_id,
                in_queue=True,
                next_review=parse_export_date(document.get("nextReview")),
            )

        return created
