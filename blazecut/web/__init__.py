"""Flask application factory for the BlazeCut HTTP API."""

import tempfile
from pathlib import Path

from flask import Flask, jsonify

from blazecut.errors import BlazecutError, InvalidRequest, ToolNotInstalled


def error_status(error: BlazecutError) -> int:
    if isinstance(error, InvalidRequest):
        return 400
    if isinstance(error, ToolNotInstalled):
        return 503
    return 500


def create_app(work_dir: Path | None = None, data_dir: Path | None = None) -> Flask:
    app = Flask(__name__)
    app.config["WORK_DIR"] = work_dir or Path(tempfile.mkdtemp(prefix="blazecut_"))
    app.config["DATA_DIR"] = data_dir

    from blazecut.web.routes import bp
    app.register_blueprint(bp)

    @app.errorhandler(BlazecutError)
    def blazecut_error(error: BlazecutError):
        return jsonify(error.to_dict()), error_status(error)

    return app
