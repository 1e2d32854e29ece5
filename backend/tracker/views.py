# backend/tracker/views.py
from django.http import JsonResponse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.views import APIView

from . import services
from .analytics import compute_analytics
from .responses import success
from .serializers import (
    AddSnippetSerializer,
    AttemptSerializer,
    BookmarkSerializer,
    ChangePasswordSerializer,
    CodeSnippetSerializer,
    LoginSerializer,
    MarkSolvedSerializer,
    NotesSerializer,
    ProblemMetaSerializer,
    ProblemRecordSerializer,
    RegisterSerializer,
    RevisionSerializer,
    UpdateProfileSerializer,
)


def _validated(serializer_class, request, **kwargs):
    serializer = serializer_class(data=request.data, context={"request": request}, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer


def _user_payload(user):
    return {"id": user.pk, "username": user.username, "email": user.email}


def not_found(request, exception=None):
    """JSON 404 for paths no route matches, so API clients never get HTML."""
    return JsonResponse({"success": False, "message": "Not found."}, status=404)


class RegisterView(APIView):
    """Creates an account and hands back its API token."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = _validated(RegisterSerializer, request)
        user = serializer.save()
        token, _ = Token.objects.get_or_create(user=user)
        return success(
            "Account created successfully.",
            status=status.HTTP_201_CREATED,
            token=token.key,
            user=_user_payload(user),
        )


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        user = _validated(LoginSerializer, request).validated_data["user"]
        token, _ = Token.objects.get_or_create(user=user)
        return success("Login successful.", token=token.key, user=_user_payload(user))


class UpdateProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):
        serializer = _validated(
            UpdateProfileSerializer, request, instance=request.user, partial=True
        )
        user = serializer.save()
        return success("Profile updated successfully.", user=_user_payload(user))


class ChangePasswordView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request):
        data = _validated(ChangePasswordSerializer, request).validated_data
        request.user.set_password(data["new_password"])
        request.user.save(update_fields=["password"])
        return success("Password changed successfully.")


class FixedPathProgressDeleteMixin:
    """
    `DELETE progress/<problem_id>/` for problem ids that collide with a fixed
    route under progress/ (analytics, bookmarks, ...). The last path segment
    is the problem id.
    """

    def delete(self, request, *args, **kwargs):
        problem_id = request.path.rstrip("/").rsplit("/", 1)[-1]
        services.unmark_solved(request.user, problem_id)
        return success("Progress deleted")


class ProgressView(APIView):
    """
    Plain attempt tracking: list everything the user has touched, or save an
    attempt for one problem.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        records = services.list_records(request.user)
        return success(
            count=len(records),
            progress=ProblemRecordSerializer(records, many=True).data,
        )

    def post(self, request):
        serializer = _validated(AttemptSerializer, request)
        data = serializer.validated_data
        record, _ = services.record_attempt(
            request.user,
            data["problem_id"],
            serializer.get_meta(),
            attempted=data["attempted"],
            date_solved=data.get("date_solved"),
        )
        return success("Progress saved", progress=ProblemRecordSerializer(record).data)


class CompanyProgressView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, company, duration):
        records = services.list_records(request.user, company=company, duration=duration)
        return success(
            count=len(records),
            progress=ProblemRecordSerializer(records, many=True).data,
        )


class ProgressDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, problem_id):
        services.unmark_solved(request.user, problem_id)
        return success("Progress deleted")


class StatsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return success(stats=services.summary_stats(request.user))


class MarkSolvedView(FixedPathProgressDeleteMixin, APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = _validated(MarkSolvedSerializer, request)
        data = serializer.validated_data
        record, created = services.mark_solved(
            request.user,
            data["problem_id"],
            serializer.get_meta(),
            notes=data.get("notes"),
            time_spent=data.get("time_spent"),
        )
        message = "Problem marked as solved!" if created else "Problem updated successfully"
        return success(message, problem=ProblemRecordSerializer(record).data)


class UnmarkSolvedView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, problem_id):
        services.unmark_solved(request.user, problem_id)
        return success("Problem unmarked successfully")


class SolvedProblemsView(FixedPathProgressDeleteMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        records = services.list_solved(request.user)
        return success(problems=ProblemRecordSerializer(records, many=True).data)


class CheckSolvedView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, problem_id):
        record = services.check_solved(request.user, problem_id)
        return success(
            is_solved=record is not None,
            problem=ProblemRecordSerializer(record).data if record else None,
        )


class ToggleBookmarkView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, problem_id):
        serializer = _validated(ProblemMetaSerializer, request)
        record = services.toggle_bookmark(request.user, problem_id, serializer.get_meta())
        message = "Bookmarked" if record.is_bookmarked else "Bookmark removed"
        return success(message, is_bookmarked=record.is_bookmarked)


class BookmarksView(FixedPathProgressDeleteMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        records = services.list_bookmarks(request.user)
        return success(bookmarks=BookmarkSerializer(records, many=True).data)


class NotesView(APIView):
    permission_classes = [IsAuthenticated]

    def put(self, request, problem_id):
        serializer = _validated(NotesSerializer, request)
        record = services.set_notes(
            request.user,
            problem_id,
            serializer.validated_data["notes"],
            serializer.get_meta(),
        )
        return success("Notes saved", problem=ProblemRecordSerializer(record).data)


class SnippetView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, problem_id):
        serializer = _validated(AddSnippetSerializer, request)
        record, snippet = services.add_snippet(
            request.user, problem_id, serializer.get_snippet(), serializer.get_meta()
        )
        return success(
            "Snippet added",
            status=status.HTTP_201_CREATED,
            snippet=CodeSnippetSerializer(snippet).data,
            problem=ProblemRecordSerializer(record).data,
        )


class SnippetDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def delete(self, request, problem_id, snippet_id):
        record = services.delete_snippet(request.user, problem_id, snippet_id)
        return success("Snippet deleted", problem=ProblemRecordSerializer(record).data)


class RevisionView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, problem_id):
        data = _validated(RevisionSerializer, request).validated_data
        record = services.toggle_revision_queue(
            request.user,
            problem_id,
            in_queue=data["in_revision_queue"],
            next_review=data["next_review"],
        )
        return success(
            "Revision queue updated",
            in_revision_queue=record.in_revision_queue,
            next_review=record.next_review,
        )


class RevisionQueueView(FixedPathProgressDeleteMixin, APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        records = services.list_revision_queue(request.user)
        return success(problems=ProblemRecordSerializer(records, many=True).data)


class AnalyticsView(FixedPathProgressDeleteMixin, APIView):
    """
    Everything the dashboard needs in one payload: totals, breakdowns, the
    30-day timeline and streaks.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        records = request.user.problem_records.all()
        return success(analytics=compute_analytics(records))


class ImageSearchView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = request.query_params.get("query") or "nature"
        try:
            per_page = min(max(int(request.query_params.get("per_page", 12)), 1), 30)
        except ValueError:
            per_page = 12
        return success(images=services.search_images(query, per_page))
