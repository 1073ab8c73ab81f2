"""
Webhook Server

Flask application exposing the GitHub webhook endpoint.
"""

import logging
from typing import Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from . import __version__
from .api import PRReviewAPI
from .config import AppConfig


logger = logging.getLogger(__name__)


def create_app(api: Optional[PRReviewAPI] = None, config: Optional[AppConfig] = None) -> Flask:
    """
    Create the webhook Flask app.

    Args:
        api: PRReviewAPI instance to delegate to
        config: Configuration used when no api is given

    Returns:
        Configured Flask application
    """
    app = Flask(__name__)
    CORS(app)

    reviewer_api = api or PRReviewAPI(config=config)
    app.config['REVIEWER_API'] = reviewer_api

    @app.route('/api/v1/health', methods=['GET'])
    def health_check():
        """Health check endpoint."""
        health = reviewer_api.get_system_health()
        return jsonify({
            'status': health['status'],
            'missing_settings': health['missing_settings'],
            'service': 'pr-review-bot',
            'version': __version__
        })

    @app.route('/api/github/webhook', methods=['POST'])
    def github_webhook():
        """Review a pull request on a GitHub webhook delivery."""
        delivery = request.headers.get('X-GitHub-Delivery', '-')
        logger.info(f"Received webhook delivery {delivery}")

        result = reviewer_api.handle_event(request.get_data())

        logger.info(f"Delivery {delivery} finished: {result.outcome.value} ({result.status_code})")
        return Response(result.message, status=result.status_code, mimetype='text/plain')

    return app
