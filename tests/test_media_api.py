import anyio
import pytest
from fastapi.testclient import TestClient

from application.utils.storage import decode_cdn_token
from infrastructure.media_sync import bootstrap_media_sync
from main import create_app
from tests.consts import BASE_URL, BUCKET


@pytest.fixture
def runtime(app_settings):
    return anyio.run(bootstrap_media_sync, app_settings)


@pytest.fixture
def client(runtime):
    return TestClient(create_app(runtime))


def test_upload_event_pushes_file_and_removes_local_copy(client, upload_dir, tmp_path):
    local = upload_dir / "2024" / "x.png"
    local.parent.mkdir()
    local.write_bytes(b"png")
    payload = {"file": str(local), "url": f"{BASE_URL}/2024/x.png", "type": "image/png"}

    resp = client.post("/api/v1/media/uploads", json=payload)

    assert resp.status_code == 200
    assert resp.json()["data"] == payload
    assert (tmp_path / "bucket" / "uploads" / "2024" / "x.png").read_bytes() == b"png"
    assert not local.exists()
    assert resp.headers["X-Request-ID"]


def test_upload_event_echoes_explicit_nulls(client, upload_dir):
    local = upload_dir / "z.png"
    local.write_bytes(b"png")
    payload = {"file": str(local), "url": f"{BASE_URL}/z.png", "type": None, "error": False}

    resp = client.post("/api/v1/media/uploads", json=payload)

    assert resp.json()["data"] == payload


def test_delete_attachment_removes_remote_object(client, runtime, upload_dir, tmp_path):
    local = upload_dir / "y.png"
    local.write_bytes(b"png")
    url = f"{BASE_URL}/y.png"
    client.post("/api/v1/media/uploads", json={"file": str(local), "url": url})
    remote = tmp_path / "bucket" / "uploads" / "y.png"
    assert remote.exists()

    assert client.post("/api/v1/media/attachments", json={"id": 42, "url": url}).status_code == 200
    resp = client.delete("/api/v1/media/attachments/42")

    assert resp.status_code == 200
    assert not remote.exists()
    assert runtime.host.attachment_url(42) is None


def test_delete_unknown_attachment_is_404(client):
    resp = client.delete("/api/v1/media/attachments/999")

    assert resp.status_code == 404
    body = resp.json()
    assert body["error"]["type"] == "AttachmentNotFound"
    assert body["error"]["details"] == {"record_id": 999}


def test_delete_attachment_outside_root_is_400(client):
    client.post("/api/v1/media/attachments", json={"id": 5, "url": "http://elsewhere/x.png"})

    resp = client.delete("/api/v1/media/attachments/5")

    assert resp.status_code == 400
    assert resp.json()["error"]["type"] == "UploadPathMismatch"


def test_size_variants_suppressed(client):
    resp = client.post("/api/v1/media/sizes", json={"sizes": {"thumbnail": {"width": 150, "height": 150}}})

    assert resp.status_code == 200
    assert resp.json()["data"]["sizes"] == {}


def test_attachment_url_rewritten_to_cdn(client):
    resp = client.get("/api/v1/media/attachments/1/url", params={"url": f"{BASE_URL}/foo/bar.jpg"})

    assert resp.status_code == 200
    token = resp.json()["data"]["url"].rsplit("/", 1)[1]
    assert decode_cdn_token(token) == {"bucket": BUCKET, "key": "uploads/foo/bar.jpg"}


def test_foreign_attachment_url_untouched(client):
    resp = client.get("/api/v1/media/attachments/1/url", params={"url": "https://elsewhere/a.jpg"})

    assert resp.json()["data"]["url"] == "https://elsewhere/a.jpg"


def test_upload_event_validation(client):
    resp = client.post("/api/v1/media/uploads", json={"url": f"{BASE_URL}/x.png"})

    assert resp.status_code == 422
    assert resp.json()["error"]["field"] == "file"


def test_storage_health(client):
    resp = client.get("/api/v1/media/health")

    assert resp.status_code == 200
    assert resp.json()["data"] == {"healthy": True, "type": "local", "bucket": BUCKET, "region": "us-east-1"}


def test_uninitialized_runtime_is_503():
    client = TestClient(create_app())

    resp = client.get("/api/v1/media/health")

    assert resp.status_code == 503
