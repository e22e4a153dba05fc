from flask import Flask
from flask_cors import CORS
from dotenv import load_dotenv
import os
from pathlib import Path

# Load environment variables BEFORE reading settings
# Get the directory where this file is located
backend_dir = Path(__file__).parent
env_path = backend_dir / '.env'
# Only load .env file if it exists (for local development)
if env_path.exists():
    load_dotenv(dotenv_path=env_path)

# Also try to load from root directory if not found in backend
root_env_path = backend_dir.parent / '.env'
if root_env_path.exists():
    load_dotenv(dotenv_path=root_env_path)

if not env_path.exists() and not root_env_path.exists():
    # In production, environment variables are set directly
    load_dotenv()

from api.routes import create_api_blueprint
from core.config import Settings
from core.logger import logger

DEV_CORS_ORIGINS = 'http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173'


def create_app(settings: Settings = None, fetcher=None) -> Flask:
    """Build the Flask app. `fetcher` overrides the configured sheet provider."""
    settings = settings or Settings.from_env()

    app = Flask(__name__)
    app.config['DASHBOARD_SETTINGS'] = settings
    app.json.ensure_ascii = False

    # CORS configuration - require explicit origins (no wildcard default)
    cors_origins = settings.cors_origins
    if not cors_origins:
        if settings.is_development:
            cors_origins = DEV_CORS_ORIGINS
            logger.warning("Using default CORS origins for development. Set CORS_ORIGINS in production!")
        else:
            raise ValueError("CORS_ORIGINS environment variable must be set in production")

    CORS(app, origins=cors_origins.split(','))

    # Register blueprints
    app.register_blueprint(create_api_blueprint(settings, fetcher), url_prefix='/api')

    @app.route('/health', methods=['GET'])
    def health_check():
        """Health check endpoint"""
        return {'status': 'ok', 'message': 'Backend is running'}, 200

    @app.route('/', methods=['GET'])
    def root():
        """Root endpoint"""
        return {'status': 'ok', 'message': 'Attendance Dashboard API', 'provider': settings.sheets_provider}, 200

    return app


if __name__ == '__main__':
    port = int(os.getenv('PORT', 5000))
    debug = os.getenv('FLASK_DEBUG', 'False').lower() == 'true'
    create_app().run(host='0.0.0.0', port=port, debug=debug)
