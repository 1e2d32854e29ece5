# backend/tracker/responses.py
from rest_framework import status as http_status
from rest_framework.response import Response


def success(message=None, status=http_status.HTTP_200_OK, **payload):
    """Wraps a payload in the {"success": true, "message": ...} envelope."""
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(payload)
    return Response(body, status=status)
