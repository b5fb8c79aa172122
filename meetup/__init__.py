import os
from datetime import timedelta
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate, upgrade
from dotenv import load_dotenv

# Load environment variables (override=True ensures .env values take precedence)
load_dotenv(override=True)

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()


def create_app(config_name=None):
    """Application factory pattern."""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-me')
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///dev.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Session configuration - the auth collaborator sets session['user_id']
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(days=30)
    app.config['SESSION_COOKIE_SECURE'] = os.environ.get('RAILWAY_ENVIRONMENT') is not None  # HTTPS only in production
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    # Google Places (search, details, walking distance)
    app.config['GOOGLE_PLACES_API_KEY'] = os.environ.get('GOOGLE_PLACES_API_KEY')

    # Dinner cutoff (hour of day, local time) and the venue used when no location is given
    app.config['DINNER_HOUR'] = int(os.environ.get('DINNER_HOUR', 19))
    app.config['VENUE_LAT'] = float(os.environ.get('VENUE_LAT', 40.7608))
    app.config['VENUE_LNG'] = float(os.environ.get('VENUE_LNG', -111.8910))

    # Restaurant cache lifetimes in seconds
    app.config['SEARCH_CACHE_TTL'] = int(os.environ.get('SEARCH_CACHE_TTL', 3600))
    app.config['DETAILS_CACHE_TTL'] = int(os.environ.get('DETAILS_CACHE_TTL', 86400))

    # Fix for postgres:// vs postgresql:// (some providers use older postgres:// format)
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgres://'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['SQLALCHEMY_DATABASE_URI'].replace(
            'postgres://', 'postgresql://', 1
        )

    if config_name == 'testing':
        app.config['TESTING'] = True
        app.config['SQLALCHEMY_DATABASE_URI'] = 'sqlite:///:memory:'
        app.config['GOOGLE_PLACES_API_KEY'] = 'test-key'

    app.logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)

    # Register blueprints
    from meetup.routes.main import main_bp
    from meetup.routes.api import api_bp
    from meetup.routes.dinner_groups import dinner_groups_bp
    from meetup.routes.attendees import attendees_bp
    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp)
    app.register_blueprint(dinner_groups_bp)
    app.register_blueprint(attendees_bp)

    from meetup.errors import register_error_handlers
    register_error_handlers(app)

    from meetup.commands import register_commands
    register_commands(app)

    # Import models so they're known to Flask-Migrate
    from meetup import models

    # Auto-run migrations in production (Railway)
    if os.environ.get('RAILWAY_ENVIRONMENT') and config_name != 'testing':
        with app.app_context():
            upgrade()

    return app
