import logging
import os

from config import config
from flask import Flask, jsonify
from flask_cors import CORS
from flask_login import LoginManager
from flask_migrate import Migrate


def create_app(config_name=None, **overrides):
    """Application factory pattern

    Keyword overrides are applied on top of the selected config before any
    extension reads it (e.g. SQLALCHEMY_DATABASE_URI for a file-backed test database).
    """
    if config_name is None:
        config_name = os.getenv("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config[config_name])
    app.config.update(overrides)

    logging.basicConfig(
        level=getattr(logging, app.config["LOG_LEVEL"].upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize CORS for the storefront frontend
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["ALLOWED_ORIGINS"]}},
        supports_credentials=True,
    )

    # Initialize SQLAlchemy
    from models import db

    db.init_app(app)

    # Initialize Flask-Migrate
    Migrate(app, db)

    # Initialize Flask-Login; sessions are established by the auth layer in front of this app
    login_manager = LoginManager()
    login_manager.init_app(app)

    # Import all models to ensure they are registered with SQLAlchemy
    from models.category import Category
    from models.product import Product
    from models.review import Review
    from models.search_history import SearchHistory, SearchTerm
    from models.user import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "error": "User not authenticated"}), 401

    # Service errors carry their own HTTP status
    from services.exceptions import CatalogError

    @app.errorhandler(CatalogError)
    def handle_catalog_error(error):
        if error.status_code >= 500:
            app.logger.error(f"{error.message}: {error.details}")
        return jsonify({"success": False, "error": error.message}), error.status_code

    # Register API blueprints
    from routes.products import bp as products_bp
    from routes.search import bp as search_bp

    app.register_blueprint(products_bp)
    app.register_blueprint(search_bp)

    # Home route
    @app.route("/")
    def home():
        return jsonify({"message": "Welcome to the Storefront Catalog API!", "version": "1.0.0"})

    # Health check route
    @app.route("/health")
    def health_check():
        try:
            db.session.execute(db.text("SELECT 1"))
            return jsonify({"status": "healthy", "database": "connected"}), 200
        except Exception as e:
            app.logger.error(f"Health check failed: {e}")
            return jsonify({"status": "unhealthy", "error": str(e)}), 500

    return app


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True, port=5001)
