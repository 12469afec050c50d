import socket
from contextlib import suppress
from flask import Blueprint, Response, abort, current_app, jsonify, request

from wedding_site.services import rsvp_service, static_service

public_bp = Blueprint("public", __name__)

READ_CHUNK = 64 * 1024


class BodyTooLarge(Exception):
    pass


def _site():
    return current_app.config["SITE_CONTEXT"]


def _cors(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response


def _json(payload, status=200):
    return _cors(jsonify(payload)), status


def _plain(text, status):
    return Response(text, status=status, mimetype="text/plain")


@public_bp.before_request
def reject_head():
    # werkzeug adds HEAD to every GET rule; only the listed methods are served
    if request.method == "HEAD":
        abort(405)


def _read_body(limit):
    """Read the request body chunk by chunk, giving up once it exceeds ``limit`` bytes."""
    chunks = []
    size = 0
    while True:
        chunk = request.stream.read(READ_CHUNK)
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            raise BodyTooLarge(size)
        chunks.append(chunk)
    return b"".join(chunks)


@public_bp.route("/rsvp", methods=["POST"], provide_automatic_options=False)
def submit_rsvp():
    site = _site()
    body = _read_body(site.max_body_bytes)

    try:
        fields = rsvp_service.parse_submission(body)
    except rsvp_service.InvalidSubmission as e:
        current_app.logger.info("[RSVP] Rejected submission: %s", e)
        return _json({"error": "Invalid submission: name is required"}, 400)

    try:
        record, total = rsvp_service.add_rsvp(site.rsvp_storage, fields)
    except Exception:
        current_app.logger.exception("[RSVP] Failed to process RSVP")
        return _json({"error": "Internal server error"}, 500)

    current_app.logger.info("[RSVP] Stored RSVP from %r (%d total)", record["name"], total)
    return _json({"message": "Thank you for your RSVP!"})


@public_bp.route("/rsvp", methods=["OPTIONS"], provide_automatic_options=False)
def rsvp_preflight():
    response = Response(status=204)
    response.headers["Access-Control-Allow-Methods"] = "POST, OPTIONS"
    response.headers["Access-Control-Allow-Headers"] = "Content-Type"
    return _cors(response)


@public_bp.route("/rsvps", methods=["GET"], provide_automatic_options=False)
def list_rsvps():
    try:
        content = rsvp_service.get_rsvps_json(_site().rsvp_storage)
    except Exception:
        current_app.logger.exception("[RSVP] Failed to read RSVP storage")
        return _json({"error": "Unable to read RSVPs"}, 500)
    return _cors(Response(content, mimetype="application/json"))


@public_bp.route("/", defaults={"asset_path": "/"}, methods=["GET"], provide_automatic_options=False)
@public_bp.route("/<path:asset_path>", methods=["GET"], provide_automatic_options=False)
def static_asset(asset_path):
    try:
        path = static_service.resolve_asset(_site().public_dir, asset_path)
    except static_service.AssetForbidden:
        current_app.logger.warning("Blocked path outside asset root: %r", request.path)
        return _plain("Forbidden", 403)

    data = static_service.read_asset(path) if path is not None else None
    if data is None:
        return _plain("Not Found", 404)
    return Response(data, content_type=static_service.content_type_for(path))


@public_bp.app_errorhandler(404)
def not_found(e):
    return _plain("Not Found", 404)


@public_bp.app_errorhandler(405)
def method_not_allowed(e):
    return _plain("Method Not Allowed", 405)


@public_bp.app_errorhandler(BodyTooLarge)
def drop_connection(e):
    """Cut the client off instead of answering an oversized body."""
    current_app.logger.warning("[RSVP] Body over %d bytes, dropping connection", _site().max_body_bytes)
    sock = request.environ.get("werkzeug.socket")
    if sock is not None:
        # already gone if the client hung up first
        with suppress(OSError):
            sock.shutdown(socket.SHUT_RDWR)
    # Only reaches a client when the server exposes no socket to cut.
    response = Response(status=413)
    response.headers["Connection"] = "close"
    return response
