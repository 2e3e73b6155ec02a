"""
project: Rulesmith
module: __init__.py
License: MIT

Flask application factory and core setup.

This module wires the Flask app to the progression preview blueprint.
Configuration is sourced from environment variables (optionally from a local
`.env` file) with reasonable defaults for development. A local `instance/`
directory holds runtime files such as the log.
"""

import logging
import os
import uuid

from dotenv import load_dotenv
from flask import Flask, jsonify

from rulesmith.config import Settings

# Load .env if present so RULESMITH_* settings can be supplied without
# exporting shell variables during development.
load_dotenv()

app = Flask(__name__, instance_relative_config=True)

try:
    os.makedirs(app.instance_path, exist_ok=True)
except OSError:
    # Read-only checkouts still serve previews; only file logging needs it
    pass

app.config.update(**Settings.from_env().to_flask_config())
# Keep row fields in the order the table is read
app.json.sort_keys = False

from rulesmith.routes.preview_api import bp_preview  # noqa: E402

app.register_blueprint(bp_preview)


def create_app():
    """Return the Flask app with settings refreshed from the environment.

    Tests and the CLI may change RULESMITH_* variables after import; calling
    this re-reads them.
    """
    app.config.update(**Settings.from_env().to_flask_config())
    return app


# Error handling: log details with a short id and return it to the client
@app.errorhandler(500)
def internal_error(e):
    error_id = uuid.uuid4().hex[:8]
    logging.exception("Unhandled exception (id=%s)", error_id)
    return jsonify({"error": "internal", "error_id": error_id}), 500
