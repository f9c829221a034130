"""Student API - routes, wire format and error envelopes."""

import json

from student_registry.errors import DuplicateIdentity
from tests.conftest import PNG_BYTES, JPEG_BYTES


def _form(**overrides):
    form = {
        "name": "Ada Lovelace",
        "email": "a@x.com",
        "phone": "1234567890",
        "studentId": "S1",
        "address": "12 Analytical Row",
        "subjects": json.dumps(["Math", "Science"]),
    }
    form.update(overrides)
    return form


def _create(client, image=None, **overrides):
    files = {"image": ("photo.png", image, "image/png")} if image else None
    return client.post("/students", data=_form(**overrides), files=files)


def test_create_returns_201_and_record(client):
    resp = _create(client)
    assert resp.status_code == 201
    body = resp.json()
    assert body["studentId"] == "S1"
    assert body["subjects"] == ["Math", "Science"]
    assert body["image"] == ""
    assert resp.headers["X-Request-ID"]


def test_create_with_image_returns_url(client, asset_store):
    body = _create(client, image=PNG_BYTES).json()
    assert body["image"] == "http://assets.local-test/test-bucket/" + asset_store.uploads[0]


def test_repeated_subject_fields(client):
    resp = client.post("/students", data={**_form(), "subjects": ["History", "Art"]})
    assert resp.status_code == 201
    assert resp.json()["subjects"] == ["History", "Art"]


def test_single_subject_field_with_comma_is_one_subject(client):
    resp = _create(client, subjects="Algorithms, Data Structures")
    assert resp.status_code == 201
    assert resp.json()["subjects"] == ["Algorithms, Data Structures"]


def test_single_subject_field_with_brackets_is_literal(client):
    resp = _create(client, subjects="[Honors] Biology")
    assert resp.status_code == 201
    assert resp.json()["subjects"] == ["[Honors] Biology"]


def test_json_array_subjects_keep_commas_inside_names(client):
    resp = _create(client, subjects=json.dumps(["Algorithms, Data Structures", "Math"]))
    assert resp.json()["subjects"] == ["Algorithms, Data Structures", "Math"]


def test_duplicate_create_is_400_with_generic_message(client):
    _create(client)
    resp = _create(client, email="b@x.com", studentId="S2")
    assert resp.status_code == 400
    assert resp.json() == {"error": {
        "code": "DUPLICATE_IDENTITY",
        "message": DuplicateIdentity.MESSAGE,
    }}
    assert len(client.get("/students").json()) == 1


def test_missing_fields_are_validation_errors(client):
    resp = client.post("/students", data={"name": "Ada"})
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert {"email", "phone", "studentId", "address"} <= {d["field"] for d in error["details"]}


def test_unsupported_image_is_rejected(client, asset_store):
    resp = client.post("/students", data=_form(),
                       files={"image": ("photo.gif", b"GIF89a....", "image/gif")})
    assert resp.status_code == 400
    assert asset_store.calls == []


def test_get_and_list(client):
    created = _create(client).json()
    assert client.get(f"/students/{created['id']}").json()["email"] == "a@x.com"
    assert [s["id"] for s in client.get("/students").json()] == [created["id"]]


def test_get_unknown_is_404(client):
    resp = client.get("/students/never-created")
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


def test_update_replaces_fields_and_photo(client, asset_store):
    created = _create(client, image=PNG_BYTES).json()
    old_ref = asset_store.uploads[0]

    resp = client.put(f"/students/{created['id']}", data=_form(name="Ada King"),
                      files={"image": ("new.jpg", JPEG_BYTES, "image/jpeg")})

    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Ada King"
    assert body["image"].endswith(asset_store.uploads[1])
    assert asset_store.deletes == [old_ref]


def test_update_with_own_identity_succeeds(client):
    created = _create(client).json()
    resp = client.put(f"/students/{created['id']}", data=_form())
    assert resp.status_code == 200


def test_update_unknown_is_404(client):
    assert client.put("/students/never-created", data=_form()).status_code == 404


def test_delete_returns_204_then_404(client, asset_store):
    created = _create(client, image=PNG_BYTES).json()
    resp = client.delete(f"/students/{created['id']}")
    assert resp.status_code == 204
    assert resp.content == b""
    assert asset_store.deletes == asset_store.uploads
    assert client.get(f"/students/{created['id']}").status_code == 404


def test_delete_unknown_is_404_without_asset_call(client, asset_store):
    assert client.delete("/students/never-created").status_code == 404
    assert asset_store.calls == []


def test_asset_store_outage_is_503(client, asset_store):
    asset_store.fail_upload = True
    resp = _create(client, image=PNG_BYTES)
    assert resp.status_code == 503
    assert resp.json()["error"]["code"] == "STORE_UNAVAILABLE"
    assert client.get("/students").json() == []


def test_cleanup_queue_endpoints(client, asset_store):
    created = _create(client, image=PNG_BYTES).json()
    asset_store.fail_delete = True
    client.delete(f"/students/{created['id']}")

    pending = client.get("/api/maintenance/asset-cleanup").json()["data"]
    assert [t["asset_ref"] for t in pending] == asset_store.uploads

    asset_store.fail_delete = False
    result = client.post("/api/maintenance/asset-cleanup/sweep").json()
    assert result["reclaimed"] == 1
    assert client.get("/api/maintenance/asset-cleanup").json()["data"] == []


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
