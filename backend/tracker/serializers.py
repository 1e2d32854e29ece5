# backend/tracker/serializers.py
import re

from django.contrib.auth import authenticate
from django.contrib.auth.models import User
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from .models import CodeSnippet, ProblemRecord

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake_case(key: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", key).lower()


class CamelCaseInputMixin:
    """
    The browser client posts camelCase keys (problemId, timeSpent, ...).
    Normalize them so the serializers only ever deal with snake_case.
    """

    def to_internal_value(self, data):
        if hasattr(data, "items"):
            data = {to_snake_case(key): value for key, value in data.items()}
        return super().to_internal_value(data)


class CodeSnippetSerializer(serializers.ModelSerializer):
    class Meta:
        model = CodeSnippet
        fields = ["id", "title", "language", "code", "created_at"]


class ProblemRecordSerializer(serializers.ModelSerializer):
    """
    Full representation of a tracked problem, snippets included, as shown in
    the notes modal and the solved list.
    """

    code_snippets = CodeSnippetSerializer(many=True, read_only=True)

    class Meta:
        model = ProblemRecord
        fields = [
            "problem_id",
            "title",
            "difficulty",
            "company",
            "duration",
            "leetcode_link",
            "notes",
            "attempted",
            "code_snippets",
            "in_revision_queue",
            "next_review",
            "is_bookmarked",
            "time_spent",
            "solved_at",
            "created_at",
            "updated_at",
        ]


class BookmarkSerializer(serializers.ModelSerializer):
    """A slim row for the bookmarks list."""

    class Meta:
        model = ProblemRecord
        fields = ["problem_id", "title", "difficulty", "company", "duration", "leetcode_link"]


class ProblemMetaSerializer(CamelCaseInputMixin, serializers.Serializer):
    """
    Metadata the client sends along with any action, used when the action
    ends up creating the record.
    """

    title = serializers.CharField(required=False, allow_blank=True, max_length=255)
    difficulty = serializers.ChoiceField(
        choices=ProblemRecord.Difficulty.choices, required=False
    )
    company = serializers.CharField(required=False, allow_blank=True, max_length=100)
    duration = serializers.CharField(required=False, allow_blank=True, max_length=50)
    leetcode_link = serializers.URLField(required=False, allow_blank=True, max_length=255)

    meta_title_field = "title"

    def get_meta(self):
        data = self.validated_data
        meta = {
            field: data[field]
            for field in ("difficulty", "company", "duration", "leetcode_link")
            if data.get(field)
        }
        if data.get(self.meta_title_field):
            meta["title"] = data[self.meta_title_field]
        return meta


class MarkSolvedSerializer(ProblemMetaSerializer):
    problem_id = serializers.CharField(max_length=255)
    notes = serializers.CharField(required=False, allow_blank=True)
    time_spent = serializers.IntegerField(required=False, allow_null=True, min_value=0)


class NotesSerializer(ProblemMetaSerializer):
    notes = serializers.CharField(allow_blank=True)


class AddSnippetSerializer(ProblemMetaSerializer):
    """`title` names the snippet here; the problem title travels as `problemTitle`."""

    problem_title = serializers.CharField(required=False, allow_blank=True, max_length=255)
    language = serializers.CharField(required=False, allow_blank=True, max_length=50)
    code = serializers.CharField(required=False, allow_blank=True)

    meta_title_field = "problem_title"

    def get_snippet(self):
        data = self.validated_data
        return {
            "title": data.get("title"),
            "language": data.get("language"),
            "code": data.get("code"),
        }


class RevisionSerializer(CamelCaseInputMixin, serializers.Serializer):
    in_revision_queue = serializers.BooleanField(required=False, allow_null=True, default=None)
    next_review = serializers.DateTimeField(required=False, allow_null=True, default=None)


class AttemptSerializer(ProblemMetaSerializer):
    """Plain progress entries: every metadata field is required, as it always was."""

    problem_id = serializers.CharField(max_length=255)
    problem_title = serializers.CharField(max_length=255)
    company = serializers.CharField(max_length=100)
    duration = serializers.CharField(max_length=50)
    difficulty = serializers.ChoiceField(choices=ProblemRecord.Difficulty.choices)
    attempted = serializers.BooleanField(required=False, default=True)
    date_solved = serializers.DateTimeField(required=False, allow_null=True)

    meta_title_field = "problem_title"


class UniqueEmailMixin:
    def validate_email(self, value):
        others = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            others = others.exclude(pk=self.instance.pk)
        if value and others.exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value


class RegisterSerializer(UniqueEmailMixin, serializers.ModelSerializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, validators=[validate_password])

    class Meta:
        model = User
        fields = ["username", "email", "password"]

    def create(self, validated_data):
        return User.objects.create_user(**validated_data)


class LoginSerializer(serializers.Serializer):
    """Signs in with either an email address or a username."""

    email = serializers.EmailField(required=False)
    username = serializers.CharField(required=False)
    password = serializers.CharField(trim_whitespace=False)

    def validate(self, attrs):
        username = attrs.get("username")
        if attrs.get("email"):
            match = User.objects.filter(email__iexact=attrs["email"]).first()
            username = match.username if match else None
        elif not username:
            raise serializers.ValidationError("Provide an email or a username.")

        user = None
        if username:
            user = authenticate(
                request=self.context.get("request"),
                username=username,
                password=attrs["password"],
            )
        if user is None:
            raise serializers.ValidationError(
                "Invalid credentials.", code="authorization"
            )
        attrs["user"] = user
        return attrs


class UpdateProfileSerializer(UniqueEmailMixin, serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["username", "email"]


class ChangePasswordSerializer(CamelCaseInputMixin, serializers.Serializer):
    current_password = serializers.CharField(trim_whitespace=False)
    new_password = serializers.CharField(trim_whitespace=False)

    def validate_current_password(self, value):
        if not self.context["request"].user.check_password(value):
            raise serializers.ValidationError("Current password is incorrect.")
        return value

    def validate_new_password(self, value):
        validate_password(value, user=self.context["request"].user)
        return value
