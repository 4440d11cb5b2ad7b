"""
StockMeta - Entry Point
Stock metadata generator for Adobe Stock and Shutterstock.

Usage:
    python app.py serve [--host HOST] [--port PORT]
    python app.py generate expand-icon.svg home.svg --platform adobe --output metadata.csv
    python app.py set-key sk-...
"""

import argparse
import logging
import os
import sys

import stockmeta.database as db
from stockmeta.csv_exporter import default_export_filename, export_csv
from stockmeta.errors import StockMetaError
from stockmeta.metadata_processor import generate
from stockmeta.prompt_builder import PLATFORMS
from stockmeta.server import create_app

logger = logging.getLogger(__name__)


def _serve(args):
    settings = db.load_generation_settings()
    app = create_app({"PROVIDER": settings["provider"], "MODEL": settings["model"]})
    app.run(host=args.host, port=args.port)
    return 0


def _generate(args):
    settings = db.load_generation_settings()
    platform = args.platform or settings["platform"]
    api_key = args.api_key or os.environ.get("OPENAI_API_KEY") or db.get_setting(db.SETTING_API_KEY)

    def on_progress(done, total):
        logger.info("[%d/%d] items settled", done, total)

    try:
        result = generate(args.filenames, api_key, platform,
                          provider_name=settings["provider"], model=settings["model"],
                          on_progress=on_progress)
    except StockMetaError as e:
        logger.error("❌ %s", e)
        return 1

    for error in result.errors:
        logger.error("❌ Error (%s): %s", error.filename, error.reason)

    output = args.output or default_export_filename(platform)
    export_csv(result.records, output, platform)
    logger.info("✅ %d record(s) written to %s (%s tokens)",
                len(result.records), output, result.usage.get("totalTokens", 0))
    return 0 if not result.errors else 2


def _set_key(args):
    if args.clear:
        db.delete_setting(db.SETTING_API_KEY)
        logger.info("Saved API key removed")
        return 0
    if not args.api_key:
        logger.error("No API key given")
        return 1
    db.save_setting(db.SETTING_API_KEY, args.api_key)
    if args.provider:
        db.save_setting(db.SETTING_PROVIDER, args.provider)
    if args.model:
        db.save_setting(db.SETTING_MODEL, args.model)
    logger.info("Settings saved")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(prog="stockmeta", description="Stock metadata generator")
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP service")
    serve.add_argument("--host", default=os.environ.get("STOCKMETA_HOST", "127.0.0.1"))
    serve.add_argument("--port", type=int, default=int(os.environ.get("STOCKMETA_PORT", "8000")))
    serve.set_defaults(func=_serve)

    gen = sub.add_parser("generate", help="Generate metadata and write a CSV")
    gen.add_argument("filenames", nargs="+")
    gen.add_argument("--platform", choices=PLATFORMS)
    gen.add_argument("--output")
    gen.add_argument("--api-key")
    gen.set_defaults(func=_generate)

    key = sub.add_parser("set-key", help="Save provider settings and API key")
    key.add_argument("api_key", nargs="?")
    key.add_argument("--provider")
    key.add_argument("--model")
    key.add_argument("--clear", action="store_true")
    key.set_defaults(func=_set_key)

    return parser


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    args = build_parser().parse_args(argv)
    db.init_db()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
