# backend/tracker/services.py
import logging
from typing import Any, Dict, List, Mapping, Optional, Tuple

import requests
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Count, F
from django.utils import timezone

from .exceptions import Conflict, NotFound, StorageError, UpstreamError, ValidationError
from .models import CodeSnippet, ProblemRecord

logger = logging.getLogger(__name__)

# Defaults used when a record is created by an action that carries no metadata
# (e.g. a bookmark toggled from a bare problem row).
DEFAULT_DIFFICULTY = ProblemRecord.Difficulty.EASY
DEFAULT_COMPANY = "unknown"
DEFAULT_DURATION = "all"

META_FIELDS = ("title", "difficulty", "company", "duration", "leetcode_link")


def validate_difficulty(difficulty: str) -> str:
    if difficulty not in ProblemRecord.Difficulty.values:
        raise ValidationError(
            f"Invalid difficulty '{difficulty}'. "
            f"Expected one of: {', '.join(ProblemRecord.Difficulty.values)}."
        )
    return difficulty


def _creation_defaults(problem_id: str, meta: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    meta = meta or {}
    defaults = {
        "title": meta.get("title") or problem_id,
        "difficulty": meta.get("difficulty") or DEFAULT_DIFFICULTY,
        "company": meta.get("company") or DEFAULT_COMPANY,
        "duration": meta.get("duration") or DEFAULT_DURATION,
        "leetcode_link": meta.get("leetcode_link") or "",
    }
    validate_difficulty(defaults["difficulty"])
    return defaults


def get_or_create_record(
    user, problem_id: str, defaults: Optional[Mapping[str, Any]] = None
) -> Tuple[ProblemRecord, bool]:
    """
    The single upsert primitive behind every mutating operation.

    Looks up the record for (user, problem_id) and creates it with the given
    defaults when absent. A concurrent insert for the same pair is resolved by
    Django's get_or_create, which falls back to the row that won the race, so a
    second creation attempt updates instead of duplicating.
    """
    try:
        record, created = ProblemRecord.objects.get_or_create(
            user=user,
            problem_id=problem_id,
            defaults=_creation_defaults(problem_id, defaults),
        )
    except IntegrityError as e:
        logger.warning("Conflicting insert for %s/%s: %s", user.pk, problem_id, e)
        raise Conflict()
    except DatabaseError as e:
        logger.error("Could not load record %s/%s: %s", user.pk, problem_id, e)
        raise StorageError()

    if created:
        logger.info("Created record %s for user %s", problem_id, user.pk)
    return record, created


def get_record(user, problem_id: str) -> ProblemRecord:
    try:
        return ProblemRecord.objects.get(user=user, problem_id=problem_id)
    except ProblemRecord.DoesNotExist:
        raise NotFound()


def mark_solved(
    user,
    problem_id: str,
    meta: Optional[Mapping[str, Any]] = None,
    notes: Optional[str] = None,
    time_spent: Optional[int] = None,
) -> Tuple[ProblemRecord, bool]:
    """
    Marks a problem as solved. A new record takes the supplied metadata; an
    existing one keeps its metadata, overwrites notes/time spent only when a
    new value is given and has its solve time refreshed.
    """
    with transaction.atomic():
        record, created = get_or_create_record(user, problem_id, meta)
        if notes:
            record.notes = notes
        if time_spent:
            record.time_spent = time_spent
        if not created:
            record.solved_at = timezone.now()
        record.save()

    if not created:
        logger.info("Re-marked %s as solved for user %s", problem_id, user.pk)
    return record, created


def unmark_solved(user, problem_id: str) -> None:
    deleted, _ = ProblemRecord.objects.filter(user=user, problem_id=problem_id).delete()
    if not deleted:
        raise NotFound("Problem not found in your solved list.")
    logger.info("Removed record %s for user %s", problem_id, user.pk)


def check_solved(user, problem_id: str) -> Optional[ProblemRecord]:
    """Returns the tracked record, or None when the problem isn't tracked."""
    return (
        ProblemRecord.objects.prefetch_related("code_snippets")
        .filter(user=user, problem_id=problem_id)
        .first()
    )


def toggle_bookmark(
    user, problem_id: str, meta: Optional[Mapping[str, Any]] = None
) -> ProblemRecord:
    with transaction.atomic():
        record, created = get_or_create_record(user, problem_id, meta)
        # A freshly created record is bookmarked; an existing one is flipped
        record.is_bookmarked = True if created else not record.is_bookmarked
        record.save(update_fields=["is_bookmarked", "updated_at"])
    return record


def set_notes(
    user, problem_id: str, notes: str, meta: Optional[Mapping[str, Any]] = None
) -> ProblemRecord:
    with transaction.atomic():
        record, _ = get_or_create_record(user, problem_id, meta)
        record.notes = notes or ""
        record.save(update_fields=["notes", "updated_at"])
    return record


def add_snippet(
    user,
    problem_id: str,
    snippet: Mapping[str, Any],
    meta: Optional[Mapping[str, Any]] = None,
) -> Tuple[ProblemRecord, CodeSnippet]:
    with transaction.atomic():
        record, _ = get_or_create_record(user, problem_id, meta)
        new_snippet = CodeSnippet.objects.create(
            record=record,
            title=snippet.get("title") or "Solution",
            language=snippet.get("language") or "javascript",
            code=snippet.get("code") or "",
        )
    logger.info(
        "Added snippet %s to %s for user %s", new_snippet.pk, problem_id, user.pk
    )
    return record, new_snippet


def delete_snippet(user, problem_id: str, snippet_id) -> ProblemRecord:
    record = get_record(user, problem_id)
    try:
        snippet_pk = int(snippet_id)
    except (TypeError, ValueError):
        raise NotFound("Snippet not found.")
    deleted, _ = record.code_snippets.filter(pk=snippet_pk).delete()
    if not deleted:
        raise NotFound("Snippet not found.")
    return record


def toggle_revision_queue(
    user,
    problem_id: str,
    in_queue: Optional[bool] = None,
    next_review=None,
) -> ProblemRecord:
    """
    Sets the revision-queue flag when one is given, flips it otherwise.
    The next review date is only touched when a value is supplied.
    """
    record = get_record(user, problem_id)
    record.in_revision_queue = (
        in_queue if in_queue is not None else not record.in_revision_queue
    )
    if next_review is not None:
        record.next_review = next_review
    record.save(update_fields=["in_revision_queue", "next_review", "updated_at"])
    return record


def list_solved(user) -> List[ProblemRecord]:
    return list(
        ProblemRecord.objects.filter(user=user)
        .prefetch_related("code_snippets")
        .order_by("-solved_at")
    )


def list_bookmarks(user) -> List[ProblemRecord]:
    return list(
        ProblemRecord.objects.filter(user=user, is_bookmarked=True).prefetch_related(
            "code_snippets"
        )
    )


def list_revision_queue(user) -> List[ProblemRecord]:
    return list(
        ProblemRecord.objects.filter(user=user, in_revision_queue=True).order_by(
            F("next_review").asc(nulls_last=True), "-solved_at"
        )
    )


def list_records(
    user, company: Optional[str] = None, duration: Optional[str] = None
) -> List[ProblemRecord]:
    records = ProblemRecord.objects.filter(user=user).prefetch_related("code_snippets")
    if company is not None:
        records = records.filter(company=company)
    if duration is not None:
        records = records.filter(duration=duration)
    return list(records)


def record_attempt(
    user,
    problem_id: str,
    meta: Optional[Mapping[str, Any]] = None,
    attempted: bool = True,
    date_solved=None,
    time_spent: Optional[int] = None,
) -> Tuple[ProblemRecord, bool]:
    """
    Saves a plain attempt entry. Unlike mark_solved, the supplied metadata is
    authoritative on update too, and the solve time is the given date.
    """
    meta = meta or {}
    solved_at = date_solved or timezone.now()

    with transaction.atomic():
        record, created = get_or_create_record(user, problem_id, meta)
        for field in META_FIELDS:
            if meta.get(field):
                setattr(record, field, meta[field])
        validate_difficulty(record.difficulty)
        record.attempted = attempted
        record.solved_at = solved_at
        if time_spent:
            record.time_spent = time_spent
        record.save()
    return record, created


def summary_stats(user) -> Dict[str, Any]:
    records = ProblemRecord.objects.filter(user=user)
    by_difficulty = (
        records.values("difficulty").annotate(count=Count("id")).order_by("difficulty")
    )
    by_company = (
        records.values("company").annotate(count=Count("id")).order_by("-count", "company")
    )
    return {
        "total_solved": records.count(),
        "by_difficulty": list(by_difficulty),
        "by_company": list(by_company),
    }


def search_images(query: str, per_page: int = 12) -> List[Dict[str, Any]]:
    """
    Proxies a photo search to Unsplash and returns the trimmed result list.
    Raises UpstreamError when the Unsplash call fails.
    """
    params = {
        "query": query,
        "per_page": per_page,
        "client_id": settings.UNSPLASH_ACCESS_KEY,
    }
    try:
        response = requests.get(
            settings.UNSPLASH_API_URL,
            params=params,
            headers={"Accept": "application/json"},
            timeout=10,
        )
        response.raise_for_status()  # Raises an HTTPError for bad responses (4xx or 5xx)
        data = response.json()
    except requests.exceptions.RequestException as e:
        logger.error("Image search for '%s' failed: %s", query, e)
        raise UpstreamError()

    return [
        {
            "id": photo["id"],
            "thumb": photo["urls"]["small"],
            "full": photo["urls"]["full"],
            "photographer": photo["user"]["name"],
            "photographer_url": photo["user"]["links"]["html"],
            "alt": photo.get("alt_description") or photo.get("description") or query,
        }
        for photo in data.get("results") or []
    ]
