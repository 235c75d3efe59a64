import base64
import json

import pytest

from application.utils.storage import (
    build_cdn_token,
    build_cdn_url,
    build_s3_url,
    decode_cdn_token,
    object_key,
    relative_upload_path,
    resolve_local_path,
    upload_source_path,
)
from domain.common.exceptions import InvalidLocalPathError
from tests.consts import BASE_URL, BUCKET


def test_relative_path_strips_base_and_slash():
    assert relative_upload_path(f"{BASE_URL}/2024/x.png", BASE_URL) == "2024/x.png"


def test_relative_path_tolerates_trailing_slash_on_base():
    assert relative_upload_path(f"{BASE_URL}/2024/x.png", BASE_URL + "/") == "2024/x.png"


@pytest.mark.parametrize(
    "url",
    [
        "http://other/wp-content/uploads/2024/x.png",
        "http://site/wp-content/uploads-old/2024/x.png",
        BASE_URL,
        BASE_URL + "/",
        "",
    ],
)
def test_relative_path_rejects_urls_outside_root(url):
    assert relative_upload_path(url, BASE_URL) is None


def test_object_key_uses_single_separator():
    assert object_key("uploads", "2024/x.png") == "uploads/2024/x.png"
    assert object_key("uploads/", "/2024/x.png") == "uploads/2024/x.png"
    assert object_key("", "2024/x.png") == "2024/x.png"


def test_cdn_token_is_base64_json():
    token = build_cdn_token(BUCKET, "uploads/foo/bar.jpg")
    raw = base64.b64decode(token)
    assert json.loads(raw) == {"bucket": BUCKET, "key": "uploads/foo/bar.jpg"}
    assert raw == b'{"bucket":"media-bucket","key":"uploads/foo/bar.jpg"}'
    assert decode_cdn_token(token) == {"bucket": BUCKET, "key": "uploads/foo/bar.jpg"}


def test_cdn_url_joins_base_and_token():
    url = build_cdn_url("https://cdn.example.net/", BUCKET, "uploads/a.png")
    base, token = url.rsplit("/", 1)
    assert base == "https://cdn.example.net"
    assert decode_cdn_token(token)["key"] == "uploads/a.png"


def test_s3_url_quotes_key():
    assert build_s3_url(BUCKET, "uploads/my file.png") == (
        "https://media-bucket.s3.amazonaws.com/uploads/my%20file.png"
    )


def test_resolve_local_path_joins_relative(upload_dir):
    assert resolve_local_path(str(upload_dir), "2024/x.png") == (upload_dir / "2024" / "x.png").resolve()


def test_resolve_local_path_accepts_absolute_inside_base(upload_dir):
    target = upload_dir / "x.png"
    assert resolve_local_path(str(upload_dir), str(target)) == target.resolve()


@pytest.mark.parametrize("path", ["../escape.png", "/etc/passwd"])
def test_resolve_local_path_rejects_escape(upload_dir, path):
    with pytest.raises(InvalidLocalPathError):
        resolve_local_path(str(upload_dir), path)


def test_upload_source_path_joins_relative_to_upload_dir(upload_dir):
    assert upload_source_path(str(upload_dir), "2024/x.png") == (upload_dir / "2024" / "x.png").resolve()


def test_upload_source_path_keeps_absolute_paths(upload_dir, tmp_path):
    assert str(upload_source_path(str(upload_dir), "/tmp/x.png")) == "/tmp/x.png"
    assert upload_source_path(str(upload_dir), str(tmp_path / "x.png")) == tmp_path / "x.png"


def test_upload_source_path_rejects_relative_escape(upload_dir):
    with pytest.raises(InvalidLocalPathError):
        upload_source_path(str(upload_dir), "../x.png")
