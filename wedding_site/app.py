from flask import Flask

from wedding_site.public.routes import public_bp


def create_app(context):
    """Build the Flask app around a SiteContext."""
    # Assets go through public_bp so the traversal guard and content types apply.
    app = Flask(__name__, static_folder=None)
    app.config["SITE_CONTEXT"] = context
    app.url_map.merge_slashes = False
    app.register_blueprint(public_bp)
    return app
