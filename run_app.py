"""
Main entry point for the affiliate widget API.

Run this file to start the Flask development server.
"""
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from affiliate_widget.api import create_app
from affiliate_widget.config import Config
from affiliate_widget.logger import get_logger

logger = get_logger(__name__)


def main():
    """Main function to run the Flask app."""
    app = create_app()

    logger.info(f"Starting Flask app on {Config.FLASK_HOST}:{Config.FLASK_PORT}")
    logger.info(f"Debug mode: {Config.FLASK_DEBUG}")

    app.run(
        host=Config.FLASK_HOST,
        port=Config.FLASK_PORT,
        debug=Config.FLASK_DEBUG
    )


if __name__ == "__main__":
    main()
