import logging
import os

from config import ProviderSettings, config
from flask import Flask, jsonify
from flask_cors import CORS


def create_app(config_name=None, provider_settings=None, translation_service=None):
    """Application factory pattern"""
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.json.ensure_ascii = False

    # Provider configuration is read once here and never from request code
    if provider_settings is None:
        provider_settings = ProviderSettings.from_env()
    app.config["PROVIDER_SETTINGS"] = provider_settings

    # Initialize CORS for the camera front-end (all origins unless restricted)
    origins = list(provider_settings.allowed_origins) or ["*"]
    CORS(
        app,
        resources={r"/api/*": {"origins": origins}},
        methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
    )

    from services.translation_service import TranslationService

    if translation_service is None:
        translation_service = TranslationService(provider_settings)
    app.extensions["translation_service"] = translation_service

    # Register API blueprints
    from routes.translation import bp as translation_bp

    app.register_blueprint(translation_bp)

    @app.errorhandler(405)
    def method_not_allowed(error):
        return jsonify({"error": "Method Not Allowed", "kind": "BadMethod"}), 405

    @app.errorhandler(413)
    def payload_too_large(error):
        return jsonify({"error": "Image too large", "kind": "BadInput"}), 413

    # Home route
    @app.route("/")
    def home():
        return jsonify({"message": "Welcome to the menu & sign translator!", "version": "1.0.0"})

    # Health check route
    @app.route("/health")
    def health_check():
        service = app.extensions["translation_service"]
        return jsonify({
            "status": "healthy" if provider_settings.primary_api_key else "misconfigured",
            "provider": provider_settings.llm_provider,
            "model": provider_settings.primary_model,
            "fallback_model": provider_settings.fallback_model,
            "fast_providers": [p.name for p in service.fast_providers],
        }), 200

    return app


if __name__ == "__main__":
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s - %(name)s - %(message)s",
    )
    app = create_app()
    app.run(debug=True, port=int(os.getenv("PORT", "5001")))
