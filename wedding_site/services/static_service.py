from pathlib import Path

DEFAULT_DOCUMENT = "index.html"

CONTENT_TYPES = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
}
FALLBACK_CONTENT_TYPE = "application/octet-stream"


class AssetForbidden(Exception):
    """Requested path resolves outside the asset root."""


def content_type_for(path):
    return CONTENT_TYPES.get(Path(path).suffix.lower(), FALLBACK_CONTENT_TYPE)


def resolve_asset(public_dir, url_path):
    """Map a decoded URL path onto a file under ``public_dir``.

    "/" maps to the default document. Raises AssetForbidden when the
    resolved path escapes the root; returns None for paths no file can have.
    """
    requested = DEFAULT_DOCUMENT if url_path in ("", "/") else url_path.lstrip("/")
    root = Path(public_dir).resolve()
    try:
        target = (root / requested).resolve()
    except ValueError:
        # embedded NUL
        return None
    if target != root and root not in target.parents:
        raise AssetForbidden(url_path)
    return target


def read_asset(path):
    """Raw bytes of an asset, or None if it cannot be read."""
    try:
        return Path(path).read_bytes()
    except OSError:
        return None
