"""
# Response Handler

Standard JSON response envelopes for the admin API.

Every helper returns a `JSONResponse` whose body is:

```json
{"status": "SUCCESS", "message": "Your request is successfully executed", "data": {...}}
```

| Helper | HTTP | status |
|---|---|---|
| `success` | 200 | `SUCCESS` |
| `failure` | 400 | `FAILURE` |
| `internal_server_error` | 500 | `SERVER_ERROR` |
| `bad_request` | 400 | `BAD_REQUEST` |
| `record_not_found` | 404 | `RECORD_NOT_FOUND` |
| `validation_error` | 422 | `VALIDATION_ERROR` |
| `unauthorized` | 401 | `UNAUTHORIZED` |

Documents are serialized with `ObjectId` rendered as a string and `_id`
exposed as `id`.
"""

from http import HTTPStatus
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


class ResponseStatus:
    SUCCESS = "SUCCESS"
    FAILURE = "FAILURE"
    SERVER_ERROR = "SERVER_ERROR"
    BAD_REQUEST = "BAD_REQUEST"
    RECORD_NOT_FOUND = "RECORD_NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UNAUTHORIZED = "UNAUTHORIZED"


DEFAULT_MESSAGES: Dict[str, str] = {
    ResponseStatus.SUCCESS: "Your request is successfully executed",
    ResponseStatus.FAILURE: "Some error occurred while performing action.",
    ResponseStatus.SERVER_ERROR: "Internal server error.",
    ResponseStatus.BAD_REQUEST: "Request parameters are invalid or missing.",
    ResponseStatus.RECORD_NOT_FOUND: "Record(s) not found with specified criteria.",
    ResponseStatus.VALIDATION_ERROR: "Invalid Data, Validation Failed.",
    ResponseStatus.UNAUTHORIZED: "You are not authorized to access the request",
}


def serialize(value: Any) -> Any:
    """
    Convert documents into JSON-compatible data.

    Dicts carrying `_id` get it renamed to `id`; nested lists and dicts are
    handled recursively. `ObjectId` becomes its hex string and datetimes ISO
    strings.
    """
    if isinstance(value, dict):
        converted = {}
        for key, item in value.items():
            converted["id" if key == "_id" else key] = serialize(item)
        return converted
    if isinstance(value, (list, tuple)):
        return [serialize(item) for item in value]
    return jsonable_encoder(value, custom_encoder={ObjectId: str})


def build_body(response_status: str, message: Optional[str] = None, data: Any = None) -> Dict[str, Any]:
    return {
        "status": response_status,
        "message": message or DEFAULT_MESSAGES[response_status],
        "data": serialize(data),
    }


def _respond(status_code: HTTPStatus, response_status: str, message: Optional[str], data: Any) -> JSONResponse:
    return JSONResponse(status_code=int(status_code), content=build_body(response_status, message, data))


def success(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    return _respond(HTTPStatus.OK, ResponseStatus.SUCCESS, message, data)


def failure(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    return _respond(HTTPStatus.BAD_REQUEST, ResponseStatus.FAILURE, message, data)


def internal_server_error(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    return _respond(HTTPStatus.INTERNAL_SERVER_ERROR, ResponseStatus.SERVER_ERROR, message, data)


def bad_request(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    return _respond(HTTPStatus.BAD_REQUEST, ResponseStatus.BAD_REQUEST, message, data)


def record_not_found(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    return _respond(HTTPStatus.NOT_FOUND, ResponseStatus.RECORD_NOT_FOUND, message, data)


def validation_error(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    return _respond(HTTPStatus.UNPROCESSABLE_ENTITY, ResponseStatus.VALIDATION_ERROR, message, data)


def unauthorized(data: Any = None, message: Optional[str] = None) -> JSONResponse:
    return _respond(HTTPStatus.UNAUTHORIZED, ResponseStatus.UNAUTHORIZED, message, data)
