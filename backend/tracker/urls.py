# backend/tracker/urls.py
from django.urls import path

from .views import (
    AnalyticsView,
    BookmarksView,
    ChangePasswordView,
    CheckSolvedView,
    CompanyProgressView,
    ImageSearchView,
    LoginView,
    MarkSolvedView,
    NotesView,
    ProgressDetailView,
    ProgressView,
    RegisterView,
    RevisionQueueView,
    RevisionView,
    SnippetDetailView,
    SnippetView,
    SolvedProblemsView,
    StatsView,
    ToggleBookmarkView,
    UnmarkSolvedView,
    UpdateProfileView,
)

urlpatterns = [
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/update-profile/", UpdateProfileView.as_view(), name="update-profile"),
    path("auth/change-password/", ChangePasswordView.as_view(), name="change-password"),
    # Fixed paths first: the catch-all problem routes below would swallow them.
    # A problem id equal to one of these segments is still deletable, see
    # FixedPathProgressDeleteMixin. "stats/all" is reserved as a company pair.
    path("progress/", ProgressView.as_view(), name="progress"),
    path("progress/stats/all/", StatsView.as_view(), name="progress-stats"),
    path("progress/mark-solved/", MarkSolvedView.as_view(), name="mark-solved"),
    path(
        "progress/unmark-solved/<str:problem_id>/",
        UnmarkSolvedView.as_view(),
        name="unmark-solved",
    ),
    path("progress/solved-problems/", SolvedProblemsView.as_view(), name="solved-problems"),
    path(
        "progress/check-solved/<str:problem_id>/",
        CheckSolvedView.as_view(),
        name="check-solved",
    ),
    path(
        "progress/toggle-bookmark/<str:problem_id>/",
        ToggleBookmarkView.as_view(),
        name="toggle-bookmark",
    ),
    path("progress/bookmarks/", BookmarksView.as_view(), name="bookmarks"),
    path("progress/notes/<str:problem_id>/", NotesView.as_view(), name="notes"),
    path("progress/snippet/<str:problem_id>/", SnippetView.as_view(), name="snippet"),
    path(
        "progress/snippet/<str:problem_id>/<str:snippet_id>/",
        SnippetDetailView.as_view(),
        name="snippet-detail",
    ),
    path("progress/revision/<str:problem_id>/", RevisionView.as_view(), name="revision"),
    path("progress/revision-queue/", RevisionQueueView.as_view(), name="revision-queue"),
    path("progress/analytics/", AnalyticsView.as_view(), name="analytics"),
    path(
        "progress/<str:company>/<str:duration>/",
        CompanyProgressView.as_view(),
        name="company-progress",
    ),
    path(
        "progress/<str:problem_id>/",
        ProgressDetailView.as_view(),
        name="progress-detail",
    ),
    path("images/search/", ImageSearchView.as_view(), name="image-search"),
]
