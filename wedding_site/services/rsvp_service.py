from wedding_site.utils.file_lock import locked_json_write, parse_json, read_text
from wedding_site.utils.helpers import now_iso, is_blank

EMPTY_LISTING = "[]"


class InvalidSubmission(ValueError):
    pass


def parse_submission(body):
    """Decode a raw request body into the submitted fields.

    Raises InvalidSubmission unless the body is a JSON object with a
    non-blank string ``name``. Unknown fields are kept as sent.
    """
    try:
        data = parse_json(body)
    except ValueError as e:
        raise InvalidSubmission(f"malformed JSON: {e}") from e
    if not isinstance(data, dict):
        raise InvalidSubmission("submission is not a JSON object")
    if is_blank(data.get("name")):
        raise InvalidSubmission("name is missing or blank")
    return data


def add_rsvp(storage, fields):
    """Append a timestamped copy of ``fields`` to the store.
    Returns (record, total_stored)."""
    record = dict(fields)
    record["createdAt"] = now_iso()
    with locked_json_write(storage) as rsvps:
        rsvps.append(record)
        total = len(rsvps)
    return record, total


def get_rsvps_json(storage):
    """Raw JSON text of every stored RSVP, "[]" when nothing has been stored."""
    content = read_text(storage)
    if not content:
        return EMPTY_LISTING
    return content
