"""
StockMeta - HTTP Service
JSON endpoints for batch metadata generation, single-field regeneration and CSV export.

The API key always comes from the x-openai-api-key request header; provider
and model come from the app config.
"""

import logging

from flask import Flask, Response, jsonify, request
from werkzeug.exceptions import HTTPException

from stockmeta.ai_providers import DEFAULT_MODEL, DEFAULT_PROVIDER, CompletionClient
from stockmeta.csv_exporter import default_export_filename, encode
from stockmeta.errors import StockMetaError, ValidationError
from stockmeta.metadata_processor import (
    DEFAULT_MAX_WORKERS, generate, regenerate_field, validate_credential, validate_platform,
)
from stockmeta.prompt_builder import PLATFORM_ADOBE, PLATFORM_SHUTTERSTOCK

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-openai-api-key"


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def _make_client(app, api_key):
    factory = app.config.get("CLIENT_FACTORY")
    if factory is not None:
        return factory(api_key)
    return CompletionClient(
        api_key,
        provider_name=app.config["PROVIDER"],
        model=app.config["MODEL"],
        timeout=app.config["REQUEST_TIMEOUT"],
    )


def create_app(config=None):
    """
    Build the Flask app.

    Args:
        config: Optional overrides. Recognized keys: PROVIDER, MODEL, MAX_WORKERS,
                REQUEST_TIMEOUT, CLIENT_FACTORY (callable(api_key) -> client)
    """
    app = Flask(__name__)
    app.config.update(
        PROVIDER=DEFAULT_PROVIDER,
        MODEL=DEFAULT_MODEL,
        MAX_WORKERS=DEFAULT_MAX_WORKERS,
        REQUEST_TIMEOUT=60,
        CLIENT_FACTORY=None,
    )
    if config:
        app.config.update(config)

    @app.errorhandler(StockMetaError)
    def handle_pipeline_error(e):
        if e.status_code >= 500:
            logger.error("Request failed: %s", e)
        return jsonify({"error": str(e)}), e.status_code

    @app.errorhandler(Exception)
    def handle_unexpected(e):
        if isinstance(e, HTTPException):
            return jsonify({"error": e.description}), e.code
        logger.exception("Unexpected error")
        return jsonify({"error": str(e) or "Internal Server Error"}), 500

    def run_batch(platform):
        data = _json_body()
        api_key = request.headers.get(API_KEY_HEADER, "")
        filenames = data.get("filenames")
        result = generate(
            filenames,
            api_key,
            platform,
            client=_make_client(app, api_key) if api_key else None,
            max_workers=app.config["MAX_WORKERS"],
        )
        return jsonify(result.to_dict())

    def run_regenerate(platform):
        data = _json_body()
        api_key = request.headers.get(API_KEY_HEADER, "")
        filename = data.get("filename")
        field = data.get("field")
        if not isinstance(filename, str) or not filename.strip():
            raise ValidationError("filename must be a non-empty string")
        if not isinstance(field, str):
            raise ValidationError("field must be a string")
        validate_credential(api_key)
        value = regenerate_field(filename, field, _make_client(app, api_key), platform,
                                 keywords=data.get("keywords"))
        return jsonify({"data": {"filename": filename, "field": field, "value": value}})

    @app.route("/metadata", methods=["POST"])
    def adobe_metadata():
        return run_batch(PLATFORM_ADOBE)

    @app.route("/shutterstock-metadata", methods=["POST"])
    def shutterstock_metadata():
        return run_batch(PLATFORM_SHUTTERSTOCK)

    @app.route("/metadata/regenerate", methods=["POST"])
    def adobe_regenerate():
        return run_regenerate(PLATFORM_ADOBE)

    @app.route("/shutterstock-metadata/regenerate", methods=["POST"])
    def shutterstock_regenerate():
        return run_regenerate(PLATFORM_SHUTTERSTOCK)

    @app.route("/export", methods=["POST"])
    def export():
        data = _json_body()
        platform = data.get("platform") or PLATFORM_ADOBE
        validate_platform(platform)
        rows = data.get("rows")
        if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
            raise ValidationError("rows must be an array of objects")
        text = encode(rows, platform)
        filename = default_export_filename(platform)
        return Response(
            text,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({"status": "ok"})

    return app
