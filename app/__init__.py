import os
import logging

import click
from flask import Flask

from app.config import config_by_name
from app.extensions import db, migrate, login_manager, limiter


def create_app(config_name=None):
    """Application factory."""

    if config_name is None:
        config_name = os.environ.get("FLASK_ENV", "development")

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])

    # --- Validate required env vars (skip in testing) ---
    if config_name != "testing":
        try:
            config_by_name[config_name].validate()
        except RuntimeError as e:
            app.logger.warning(f"Config validation: {e}")

    # --- Init extensions ---
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    # --- Import models so Alembic can discover them ---
    with app.app_context():
        from app import models  # noqa: F401

    # --- Register blueprints ---
    from app.blueprints.cards import cards_bp
    from app.blueprints.sections import sections_bp
    from app.blueprints.boards import boards_bp
    from app.blueprints.workspaces import workspaces_bp

    app.register_blueprint(cards_bp)
    app.register_blueprint(sections_bp)
    app.register_blueprint(boards_bp)
    app.register_blueprint(workspaces_bp)

    # --- Error handlers ---
    from app.errors import register_error_handlers
    register_error_handlers(app)

    # --- CLI commands ---
    register_cli(app)

    # --- Security headers ---
    @app.after_request
    def add_security_headers(response):
        """Add security headers to every response."""
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Cache-Control"] = "no-store"
        if not app.debug:
            response.headers["Strict-Transport-Security"] = (
                "max-age=31536000; includeSubDomains"
            )
        return response

    # --- Logging ---
    if not app.debug:
        logging.basicConfig(level=logging.INFO)

    return app


def register_cli(app):
    """Register custom CLI commands with the Flask app."""

    @app.cli.command("seed-sections")
    def seed_sections():
        """Create the default section template (To Do, Doing, ... Completed).

        Safe to re-run: titles that already exist are skipped.

        Usage:
            flask seed-sections
        """
        from app.services.section_service import default_sections, seed_defaults

        created = seed_defaults()
        db.session.commit()

        click.echo(f"Created {created} section(s). Template order:")
        for rank, section in enumerate(default_sections(), start=1):
            click.echo(f"  {rank}. {section.title}")

    @app.cli.command("create-user")
    @click.option("--email", required=True, help="User email")
    @click.option("--name", "full_name", default=None, help="Full name")
    @click.option("--admin", "is_admin", is_flag=True, help="Grant admin rights")
    def create_user(email, full_name, is_admin):
        """Create a user (or rotate an existing user's token) and print the API token.

        Usage:
            flask create-user --email admin@example.com --admin
        """
        import secrets

        from app.models.user import User

        email = email.lower().strip()
        user = User.query.filter_by(email=email).first()
        if user is None:
            user = User(email=email, full_name=full_name, is_admin=is_admin)
            db.session.add(user)
            click.echo(f"Created user: {email}")
        else:
            click.echo(f"User already exists, rotating token: {email}")
            if is_admin:
                user.is_admin = True

        user.api_token = secrets.token_urlsafe(32)
        db.session.commit()

        click.echo("")
        click.echo("=" * 60)
        click.echo(f"  User:   {user.email} (id: {user.id})")
        click.echo(f"  Admin:  {bool(user.is_admin)}")
        click.echo(f"  Token:  {user.api_token}")
        click.echo("=" * 60)
        click.echo("Send it as:  Authorization: Bearer <token>")
