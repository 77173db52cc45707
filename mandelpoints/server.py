"""Flask adapter exposing the generator as a JSON endpoint."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from flask import Flask, jsonify, request, send_from_directory

from .errors import InvalidArgument
from .generator import GeneratorConfig, PointCloudGenerator
from .schema import RequestParams

logger = logging.getLogger(__name__)

ROUTE = "/post-mandelbrot-request"


def create_app(config: Optional[GeneratorConfig] = None, assets_dir: Union[str, Path, None] = None) -> Flask:
    """Build the application; ``assets_dir`` is served as static files when given."""

    if assets_dir is not None:
        assets_dir = Path(assets_dir).expanduser().resolve()
        app = Flask(__name__, static_folder=str(assets_dir), static_url_path="")
    else:
        app = Flask(__name__, static_folder=None)
    app.config["GENERATOR"] = PointCloudGenerator(config)

    @app.post(ROUTE)
    def post_mandelbrot_request():
        if not request.is_json:
            logger.warning("rejected request with content type %r", request.content_type)
            return jsonify(error="expected an application/json request body", field=None), 415
        payload = request.get_json(silent=True)
        if payload is None:
            logger.warning("rejected request with a malformed JSON body")
            return jsonify(error="request body must be JSON", field=None), 400
        try:
            params = RequestParams.from_mapping(payload)
            response = app.config["GENERATOR"].respond(params)
        except InvalidArgument as exc:
            logger.warning("rejected request: %s", exc)
            return jsonify(error=str(exc), field=exc.field), 422
        logger.info("served %d points for %s", len(response.points), params.to_dict())
        return jsonify(response.to_dict())

    if assets_dir is not None:

        @app.get("/")
        def index():
            return send_from_directory(app.static_folder, "index.html")

    return app


def run_server(app: Flask, host: str = "127.0.0.1", port: int = 3000) -> None:
    logger.debug("listening on %s:%d", host, port)
    app.run(host=host, port=port, threaded=True)
