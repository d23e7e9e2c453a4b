from datetime import datetime, timezone
import json

from bson import ObjectId
import pytest

from admin_backend.utils import response_handler as res


def _body(response):
    return json.loads(response.body)


def test_success_envelope():
    response = res.success(data={"totalRecords": 2})

    assert response.status_code == 200
    assert _body(response) == {
        "status": "SUCCESS",
        "message": "Your request is successfully executed",
        "data": {"totalRecords": 2},
    }


@pytest.mark.parametrize(
    "helper, status_code, status",
    [
        (res.failure, 400, "FAILURE"),
        (res.internal_server_error, 500, "SERVER_ERROR"),
        (res.bad_request, 400, "BAD_REQUEST"),
        (res.record_not_found, 404, "RECORD_NOT_FOUND"),
        (res.validation_error, 422, "VALIDATION_ERROR"),
        (res.unauthorized, 401, "UNAUTHORIZED"),
    ],
)
def test_error_helpers(helper, status_code, status):
    response = helper()

    assert response.status_code == status_code
    body = _body(response)
    assert body["status"] == status
    assert body["message"] == res.DEFAULT_MESSAGES[status]
    assert body["data"] is None


def test_custom_message():
    response = res.validation_error(message="invalid objectId.")

    assert _body(response)["message"] == "invalid objectId."


def test_documents_are_serialized():
    blog_id = ObjectId()
    user_id = ObjectId()
    created = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)

    data = res.serialize(
        {"data": [{"_id": blog_id, "addedBy": user_id, "createdAt": created}], "paginator": {"next": None}}
    )

    assert data == {
        "data": [{"id": str(blog_id), "addedBy": str(user_id), "createdAt": "2024-05-01T12:30:00+00:00"}],
        "paginator": {"next": None},
    }
