import pytest
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

PASSWORD = "correct-horse-battery-9"

PROBLEM_META = {
    "title": "Two Sum",
    "difficulty": "Easy",
    "company": "Google",
    "duration": "30days",
    "leetcode_link": "https://leetcode.com/problems/two-sum/",
}


@pytest.fixture
def user(django_user_model):
    return django_user_model.objects.create_user(username="alice", password=PASSWORD)


@pytest.fixture
def other_user(django_user_model):
    return django_user_model.objects.create_user(username="bob", password=PASSWORD)


@pytest.fixture
def meta():
    return dict(PROBLEM_META)


@pytest.fixture
def anonymous_client():
    return APIClient()


@pytest.fixture
def api_client(user):
    token = Token.objects.create(user=user)
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {token.key}")
    return client
