#!/usr/bin/env python3
"""
PR Review Bot Server

Runs the webhook server with configuration from the environment,
or from a YAML file passed as the first argument.
"""

import sys

from pr_review_bot.config import load_config, setup_logging
from pr_review_bot.server import create_app


def main():
    config = load_config(sys.argv[1] if len(sys.argv) > 1 else None)
    setup_logging(config.logging)

    app = create_app(config=config)

    print("🚀 Starting PR Review Bot Server...")
    print(f"📍 Server will be available at: http://{config.server.host}:{config.server.port}")
    print("📋 Endpoints:")
    print("   - Health Check: GET /api/v1/health")
    print("   - GitHub Webhook: POST /api/github/webhook")

    app.run(
        host=config.server.host,
        port=config.server.port,
        debug=config.debug
    )


if __name__ == '__main__':
    main()
