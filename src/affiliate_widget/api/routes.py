"""
API routes for the affiliate widget.
"""
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from ..logger import get_logger
from ..schemas.settings import MatchRequest
from ..services.pipeline import AffiliateMatcher

logger = get_logger(__name__)

# Create blueprint
api_bp = Blueprint('api', __name__, url_prefix='/api')


def get_matcher() -> AffiliateMatcher:
    """Get the pipeline registered on the current app."""
    return current_app.extensions['affiliate_matcher']


@api_bp.route('/match', methods=['POST'])
def match_products() -> tuple[Dict[str, Any], int]:
    """
    Find affiliate products for article content.

    Expected JSON:
    {
        "content": "Ten minutes on a yoga mat every morning..."
    }

    Returns:
    {
        "status": "success",
        "source": "matched",
        "keywords": [...],
        "count": 1,
        "products": [...],
        "display": {"items_desktop": 4, ...}
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({
            'status': 'error',
            'message': 'JSON body is required'
        }), 400

    try:
        match_request = MatchRequest.model_validate(data)
    except ValidationError as e:
        return jsonify({
            'status': 'error',
            'message': 'content is required and must be a string',
            'errors': e.errors(include_url=False)
        }), 400

    try:
        matcher = get_matcher()
        result = matcher.match(match_request.content)

        logger.info(f"Match complete: source={result.source}, products={len(result.products)}")

        return jsonify({
            'status': 'success',
            **result.to_dict()
        }), 200

    except Exception as e:
        logger.error(f"Error in match endpoint: {e}", exc_info=True)
        return jsonify({
            'status': 'error',
            'message': str(e)
        }), 500


@api_bp.route('/settings', methods=['GET'])
def get_settings() -> tuple[Dict[str, Any], int]:
    """Return the current validated settings. Secrets are never stored here."""
    try:
        settings = get_matcher().load_settings()
        return jsonify({
            'status': 'success',
            'settings': settings.model_dump(mode='json')
        }), 200

    except Exception as e:
        logger.error(f"Error in settings endpoint: {e}", exc_info=True)
        return jsonify({
            'status': 'error',
            'message': str(e)
        }), 500
