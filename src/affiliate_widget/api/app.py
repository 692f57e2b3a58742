"""
Flask application factory for the affiliate widget.
"""
from typing import Optional

from flask import Flask
from flask_cors import CORS

from .. import __version__
from ..catalog import InMemoryCatalog
from ..config import Config
from ..logger import get_logger
from ..services.credentials import EnvCredentialProvider
from ..services.pipeline import AffiliateMatcher
from ..settings import JsonSettingsStore
from .routes import api_bp

logger = get_logger(__name__)


def build_matcher() -> AffiliateMatcher:
    """Wire the pipeline from the configured settings and catalog files."""
    if Config.CATALOG_PATH.exists():
        catalog = InMemoryCatalog.from_json(Config.CATALOG_PATH)
    else:
        logger.warning(f"Catalog file not found: {Config.CATALOG_PATH}, starting with an empty catalog")
        catalog = InMemoryCatalog()

    if not catalog.has_vocabulary():
        logger.warning("Catalog has no affiliate_tags vocabulary terms; every request will use fallback products")
    if not catalog.has_product_type():
        logger.warning("Catalog has no affiliate_item products")

    return AffiliateMatcher(
        settings=JsonSettingsStore(Config.SETTINGS_PATH),
        credentials=EnvCredentialProvider(),
        catalog=catalog,
    )


def create_app(matcher: Optional[AffiliateMatcher] = None) -> Flask:
    """
    Create and configure Flask application.

    Args:
        matcher: Pipeline to serve (built from Config when omitted)

    Returns:
        Configured Flask app instance
    """
    app = Flask(__name__)

    app.config['SECRET_KEY'] = Config.SECRET_KEY
    app.config['ENV'] = Config.FLASK_ENV

    # Enable CORS with configured origins
    cors_origins = Config.get_cors_origins()
    if cors_origins == ["*"]:
        CORS(app)
    else:
        CORS(app, origins=cors_origins)

    app.extensions['affiliate_matcher'] = matcher or build_matcher()

    app.register_blueprint(api_bp)

    # Health check
    @app.route('/health')
    def health():
        """Health check endpoint."""
        return {'status': 'healthy', 'version': __version__, 'warnings': Config.validate()}

    logger.info("Flask app created")
    logger.info(f"Configuration: {Config.get_summary()}")

    errors = Config.validate()
    if errors:
        logger.warning(f"Configuration warnings: {errors}")

    return app
