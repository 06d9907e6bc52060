"""
Layerpost Backend — Exception Hierarchy Tests
==============================================

What we test:
    ✅ Codes and statuses per exception class
    ✅ Caller-supplied context dicts are copied, never mutated
    ✅ error_body() envelope for app and unexpected errors
"""

from app.exceptions import (
    DatabaseError,
    NotFoundError,
    PayloadError,
    ValidationError,
    error_body,
)


class TestContextHandling:

    def test_validation_error_does_not_mutate_caller_context(self):
        context = {"errors": []}

        error = ValidationError(message="bad", field="title", context=context)

        assert context == {"errors": []}
        assert error.context == {"errors": [], "field": "title"}

    def test_not_found_does_not_mutate_caller_context(self):
        context = {"hint": "check the id"}

        error = NotFoundError(resource="post", resource_id="abc", context=context)

        assert context == {"hint": "check the id"}
        assert error.context["resource_id"] == "abc"

    def test_shared_context_reused_across_errors(self):
        shared = {}

        first = NotFoundError(resource="post", resource_id="1", context=shared)
        second = ValidationError(context=shared)

        assert shared == {}
        assert "resource" not in second.context
        assert first.context["resource"] == "post"


class TestErrorBody:

    def test_app_error_envelope(self):
        body = error_body(PayloadError("too big", status_code=413), request_id="r1")

        assert body == {
            "error": "invalid_payload",
            "message": "too big",
            "details": None,
            "request_id": "r1",
        }

    def test_database_error_keeps_generic_message(self):
        body = error_body(DatabaseError(context={"operation": "create"}))

        assert body["error"] == "database_error"
        assert body["details"] == {"operation": "create"}

    def test_unexpected_error_hidden_when_not_exposed(self):
        body = error_body(RuntimeError("db password wrong"), expose_details=False)

        assert body["error"] == "internal_error"
        assert "password" not in body["message"]
        assert body["details"] is None
