"""
Gym Club Management API Application Factory.
"""
import importlib
import logging
import os

from dotenv import load_dotenv
from flask import Flask, jsonify
from flask_jwt_extended import JWTManager
from flask_migrate import Migrate
from flask_restx import Api
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import text

# Initialize extensions
db = SQLAlchemy()
jwt = JWTManager()
migrate = Migrate()

CONFIG_MAPPING = {
    'development': ('gym_api.config.development_config', 'DevelopmentConfig'),
    'testing': ('gym_api.config.testing_config', 'TestingConfig'),
    'production': ('gym_api.config.production_config', 'ProductionConfig')
}


def create_app(config_name=None):
    """
    Application Factory Pattern implementation.

    Args:
        config_name: Configuration name to use (development, testing, production).

    Returns:
        Flask application instance.
    """
    # Load environment variables
    load_dotenv()

    app = Flask(__name__)

    app_config = config_name or os.getenv("FLASK_ENV", "development")
    if app_config not in CONFIG_MAPPING:
        app.logger.warning("Unknown configuration %r, falling back to development", app_config)
        app_config = 'development'

    module_path, class_name = CONFIG_MAPPING[app_config]
    config_class = getattr(importlib.import_module(module_path), class_name)
    app.config.from_object(config_class)

    _configure_logging(app)
    app.logger.info("Loaded configuration class: %s", class_name)
    app.logger.debug("Database URI: %s", app.config.get('SQLALCHEMY_DATABASE_URI'))

    # Initialize extensions with app
    db.init_app(app)
    jwt.init_app(app)
    migrate.init_app(app, db)

    # Import models to ensure they're registered with SQLAlchemy
    from gym_api.models import CoachMember, Membership, Subscription, User  # noqa: F401

    api = Api(
        app,
        version=app.config.get("API_VERSION", "1.0"),
        title=app.config.get("API_TITLE", "Gym Club Management API"),
        description=app.config.get("API_DESCRIPTION", "Members, memberships and subscriptions"),
        doc="/api/docs",
        authorizations={
            'Bearer Auth': {
                'type': 'apiKey',
                'in': 'header',
                'name': 'Authorization',
                'description': 'Enter: **Bearer &lt;JWT&gt;**'
            },
        },
        security='Bearer Auth'
    )
    _register_error_handlers(api)

    from gym_api.api.coach_members import coach_member_ns
    from gym_api.api.memberships import membership_ns
    from gym_api.api.subscriptions import subscription_ns

    api.add_namespace(subscription_ns, path='/api/subscriptions')
    api.add_namespace(membership_ns, path='/api/memberships')
    api.add_namespace(coach_member_ns, path='/api/coach-members')

    @app.route('/health')
    def health_check():
        """Health check endpoint to verify the application is running."""
        return jsonify({
            'status': 'healthy',
            'environment': app_config,
            'database_connected': _check_db_connection()
        })

    def _check_db_connection():
        """Check if the database connection is working."""
        try:
            db.session.execute(text('SELECT 1'))
            return True
        except Exception as e:
            app.logger.error("Database connection error: %s", e)
            return False

    @app.shell_context_processor
    def shell_context():
        return {"app": app, "db": db}

    from gym_api.commands import register_commands
    register_commands(app)

    return app


def _configure_logging(app):
    """
    Apply LOG_LEVEL to the app logger.

    The app logger is named after the package, so module loggers under
    gym_api.* propagate to Flask's default handler.
    """
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    app.logger.setLevel(level)


def _register_error_handlers(api):
    """Translate domain errors into the response envelope."""
    from gym_api.errors import GymApiError

    @api.errorhandler(GymApiError)
    def handle_gym_api_error(error):
        return error.to_dict(), error.code
