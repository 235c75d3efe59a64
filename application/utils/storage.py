"""Object key and URL helpers shared by put, delete and URL rewriting.

Every key the service writes, deletes or points the CDN at goes through
``relative_upload_path`` and ``object_key`` so the three stay in sync.
"""
from __future__ import annotations

import base64
import json
from pathlib import Path
from typing import Optional
from urllib.parse import quote

from domain.common.exceptions import InvalidLocalPathError


def relative_upload_path(url: str, base_url: str) -> Optional[str]:
    """Path of ``url`` below ``base_url``, without leading slash.

    Returns None when the URL is not under the upload root. The base must
    match on a path boundary: ``.../uploads-old/x.png`` is not under
    ``.../uploads``.
    """
    if not url or not base_url:
        return None
    base = base_url.rstrip("/")
    if not url.startswith(base):
        return None
    rest = url[len(base):]
    if rest and not rest.startswith("/"):
        return None
    rest = rest.lstrip("/")
    return rest or None


def object_key(prefix: str, relative_path: str) -> str:
    """``<prefix>/<relative_path>`` with exactly one separating slash."""
    relative_path = relative_path.lstrip("/")
    prefix = prefix.strip("/")
    if not prefix:
        return relative_path
    return f"{prefix}/{relative_path}"


def build_cdn_token(bucket: str, key: str) -> str:
    payload = json.dumps({"bucket": bucket, "key": key}, separators=(",", ":"))
    return base64.b64encode(payload.encode("utf-8")).decode("ascii")


def decode_cdn_token(token: str) -> dict:
    return json.loads(base64.b64decode(token.encode("ascii")))


def build_cdn_url(cdn_base_url: str, bucket: str, key: str) -> str:
    """Image handler URL: ``<cdn_base_url>/<base64(json{bucket,key})>``."""
    return f"{cdn_base_url.rstrip('/')}/{build_cdn_token(bucket, key)}"


def build_s3_url(bucket: str, key: str) -> str:
    """Direct bucket URL, bypassing the image handler."""
    return f"https://{bucket}.s3.amazonaws.com/{quote(key, safe='/')}"


def resolve_local_path(base_dir: str, path: str) -> Path:
    """Resolve ``path`` against the upload base directory.

    Relative paths are joined to ``base_dir``; absolute paths are accepted
    as long as they sit inside it.

    Raises:
        InvalidLocalPathError: the path escapes ``base_dir``
    """
    base = Path(base_dir).resolve()
    candidate = Path(path)
    if candidate.is_absolute():
        full = candidate.resolve()
    else:
        full = (base / path.lstrip("/")).resolve()
    try:
        full.relative_to(base)
    except ValueError:
        raise InvalidLocalPathError(path, str(base))
    return full


def upload_source_path(base_dir: str, path: str) -> Path:
    """Path of the file an upload event refers to.

    Absolute paths are taken as given; relative paths are resolved against
    the upload base directory and must stay inside it.

    Raises:
        InvalidLocalPathError: a relative path escapes ``base_dir``
    """
    if Path(path).is_absolute():
        return Path(path)
    return resolve_local_path(base_dir, path)
