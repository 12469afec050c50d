#!/usr/bin/env python3
"""Wedding site server - static pages plus the RSVP API. Port configurable via PORT in .env."""

import logging

from wedding_site.app import create_app
from wedding_site.config import load_context


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    context = load_context()
    app = create_app(context)
    app.logger.info(
        "Wedding website server is running on port %d (assets: %s, RSVPs: %s)",
        context.port, context.public_dir, context.rsvp_storage,
    )
    app.run(host=context.host, port=context.port, debug=False)


if __name__ == "__main__":
    main()
