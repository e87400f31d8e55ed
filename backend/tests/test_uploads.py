"""Tests for multipart create/edit on /api/events and upload storage."""
import io
import json
import os

from fastapi import UploadFile
from starlette.datastructures import Headers

from eventrsvp.services import images
from eventrsvp.services.images import CloudinaryImageStore
from tests.conftest import create_test_event

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _form(**overrides):
    data = {
        "title": "Photo Walk",
        "description": "Bring a camera",
        "date": "2026-12-05T09:00:00Z",
        "maxAttendees": "12",
        "location": json.dumps({"address": "Lekki Phase 1", "lat": 6.43, "lng": 3.45}),
    }
    data.update(overrides)
    return data


def _stored_files(tmp_path):
    upload_dir = tmp_path / "uploads"
    return list(upload_dir.iterdir()) if upload_dir.exists() else []


class TestFormCreate:

    def test_create_with_file(self, client, tmp_path):
        resp = client.post(
            "/api/events",
            data=_form(),
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        assert data["maxAttendees"] == 12
        assert data["location"]["address"] == "Lekki Phase 1"
        assert data["image"].endswith(".png")
        assert os.path.exists(data["image"])
        assert data["image"].startswith(str(tmp_path / "uploads"))

    def test_create_form_without_file(self, client):
        resp = client.post(
            "/api/events",
            data=_form(maxAttendees="5", location=json.dumps({"address": "1 Main St"})),
        )
        assert resp.status_code == 200, resp.text
        data = resp.json()["data"]
        assert data["maxAttendees"] == 5
        assert data["location"]["address"] == "1 Main St"
        assert data["image"] is None

    def test_created_event_is_readable(self, client):
        created = client.post("/api/events", data=_form()).json()["data"]
        resp = client.get(f"/api/events/{created['eventId']}")
        assert resp.status_code == 200
        assert resp.json()["title"] == "Photo Walk"

    def test_missing_fields_store_nothing(self, client, tmp_path):
        form = _form()
        form.pop("title")
        resp = client.post(
            "/api/events",
            data=form,
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Missing required fields"
        assert _stored_files(tmp_path) == []

    def test_unsupported_file_type(self, client):
        resp = client.post(
            "/api/events",
            data=_form(),
            files={"image": ("notes.txt", b"hello", "text/plain")},
        )
        assert resp.status_code == 400

    def test_malformed_location(self, client):
        resp = client.post("/api/events", data=_form(location="{not json"))
        assert resp.status_code == 400
        assert resp.json()["message"] == "Invalid request body"

    def test_non_numeric_capacity(self, client):
        resp = client.post("/api/events", data=_form(maxAttendees="lots"))
        assert resp.status_code == 400


class TestFormEdit:

    def test_edit_replaces_image(self, client):
        event = create_test_event(client, title="Keep")
        resp = client.put(
            f"/api/events/{event['eventId']}",
            data={"description": "New description"},
            files={"image": ("cover.jpg", b"\xff\xd8\xff" + b"\x00" * 16, "image/jpeg")},
        )
        assert resp.status_code == 200, resp.text
        updated = resp.json()["event"]
        assert updated["title"] == "Keep"
        assert updated["description"] == "New description"
        assert updated["image"].endswith(".jpg")

    def test_edit_with_form_fields_only(self, client):
        event = create_test_event(client)
        resp = client.put(
            f"/api/events/{event['eventId']}",
            data={"title": "Renamed", "maxAttendees": "40"},
        )
        assert resp.status_code == 200, resp.text
        updated = resp.json()["event"]
        assert updated["title"] == "Renamed"
        assert updated["maxAttendees"] == 40

    def test_edit_missing_event(self, client, tmp_path):
        resp = client.put(
            "/api/events/missing",
            data={"title": "x"},
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 404
        assert _stored_files(tmp_path) == []

    def test_rejected_location_stores_nothing(self, client, tmp_path):
        event = create_test_event(client)
        resp = client.put(
            f"/api/events/{event['eventId']}",
            data={"location": json.dumps({"lat": 1.0, "lng": 2.0})},
            files={"image": ("cover.png", PNG_BYTES, "image/png")},
        )
        assert resp.status_code == 400
        assert resp.json()["message"] == "Location address is required"
        assert _stored_files(tmp_path) == []
        assert client.get(f"/api/events/{event['eventId']}").json()["image"] is None


class TestCloudinaryStore:

    def _upload(self, filename):
        return UploadFile(
            file=io.BytesIO(PNG_BYTES),
            filename=filename,
            headers=Headers({"content-type": "image/png"}),
        )

    def test_same_filename_gets_distinct_public_ids(self, monkeypatch):
        calls = []

        def fake_upload(file, **options):
            calls.append(options)
            return {"secure_url": f"https://cdn.example.com/{options['public_id']}.png"}

        monkeypatch.setattr(images.cloudinary.uploader, "upload", fake_upload)
        store = CloudinaryImageStore("demo", "key", "secret")

        first = store.save(self._upload("cover.png"))
        second = store.save(self._upload("cover.png"))

        assert first != second
        assert calls[0]["public_id"] != calls[1]["public_id"]
        assert all(c["public_id"].startswith("cover-") for c in calls)
        assert all(c["folder"] == "event-images" for c in calls)
