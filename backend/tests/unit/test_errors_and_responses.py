import pytest
from flask import Flask

from practice_planner.core.api_utils import (
    api_response,
    error_response,
    register_error_handlers,
)
from practice_planner.core.exceptions import (
    ConflictError,
    InternalError,
    NotFoundError,
    PlannerError,
    ValidationError,
)


@pytest.fixture
def bare_app():
    app = Flask(__name__)
    register_error_handlers(app)

    @app.route("/conflict")
    def conflict():
        raise ConflictError("Cannot delete the last resource of a club")

    @app.route("/invalid")
    def invalid():
        raise ValidationError("Invalid club_id", "club_id")

    return app


class TestErrorTypes:
    @pytest.mark.parametrize(
        "error_cls, kind, status",
        [
            (ValidationError, "validation", 400),
            (NotFoundError, "not_found", 404),
            (ConflictError, "conflict", 409),
            (InternalError, "internal", 500),
        ],
    )
    def test_kind_and_status(self, error_cls, kind, status):
        error = error_cls("boom")

        assert isinstance(error, PlannerError)
        assert error.kind == kind
        assert error.status_code == status
        assert str(error) == "boom"

    def test_to_dict_includes_field_only_when_known(self):
        assert ValidationError("bad", "name").to_dict() == {
            "error": "validation",
            "message": "bad",
            "field": "name",
        }
        assert "field" not in NotFoundError("missing").to_dict()


class TestResponses:
    def test_api_response_shape(self, bare_app):
        with bare_app.test_request_context():
            response, status = api_response(True, "ok", {"a": 1}, 201)

        assert status == 201
        assert response.get_json() == {"success": True, "message": "ok", "data": {"a": 1}}

    def test_api_response_omits_missing_data(self, bare_app):
        with bare_app.test_request_context():
            response, _ = api_response(True, "deleted")

        assert "data" not in response.get_json()

    def test_error_response(self, bare_app):
        with bare_app.test_request_context():
            response, status = error_response(NotFoundError("Practice not found", "practice_id"))

        assert status == 404
        assert response.get_json() == {
            "success": False,
            "message": "Practice not found",
            "error": "not_found",
            "field": "practice_id",
        }

    def test_handler_maps_errors_to_status(self, bare_app):
        client = bare_app.test_client()

        conflict = client.get("/conflict")
        invalid = client.get("/invalid")

        assert conflict.status_code == 409
        assert conflict.get_json()["error"] == "conflict"
        assert invalid.status_code == 400
        assert invalid.get_json()["field"] == "club_id"
