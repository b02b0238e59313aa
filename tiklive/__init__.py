import os
from pathlib import Path
import logging
from logging.handlers import RotatingFileHandler

import click
from flask import Flask, has_request_context, request, session
from flask_babel import gettext as _
from .extensions import db, migrate, login_manager, csrf, mail, babel
from .config import Config
from .backend import init_backend
from .models.user import User
from .services.exceptions import AuthenticationFailed

# Blueprints
from .blueprints.errors import errors_bp
from .blueprints.proxy import proxy_bp
from .blueprints.auth import auth_bp
from .blueprints.influencer import influencer_bp
from .blueprints.company import company_bp
from .blueprints.account import account_bp
from .blueprints.admin import admin_bp
from .blueprints.main import main_bp


# Optional: Sentry
def _init_sentry(app):
    dsn = app.config.get("SENTRY_DSN")
    if not dsn:
        return
    try:
        import sentry_sdk
        from sentry_sdk.integrations.flask import FlaskIntegration
        from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

        sentry_sdk.init(
            dsn=dsn,
            integrations=[FlaskIntegration(), SqlalchemyIntegration()],
            traces_sample_rate=app.config.get("SENTRY_TRACES_SAMPLE_RATE", 0.0),
            environment=os.getenv("ENV", "development"),
            release=app.config.get("APP_VERSION") or os.getenv("GIT_COMMIT", None),
            send_default_pii=False,
        )
        app.logger.info("Sentry initialized.")
    except Exception as e:
        app.logger.warning(f"Sentry init failed: {e}")


def _init_logging(app):
    # Base level
    level_name = app.config.get("LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    app.logger.setLevel(level)

    # app.logger is shared by every app built in this process; attach handlers once
    if any(getattr(h, "_tiklive", False) for h in app.logger.handlers):
        return

    # Ensure log dir exists
    log_dir = Path(app.config.get("LOG_DIR", "logs"))
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / app.config.get("LOG_FILENAME", "tiklive.log")

    # Formatter: text or JSON
    if app.config.get("LOG_JSON", False):
        import json_log_formatter
        formatter = json_log_formatter.JSONFormatter()
    else:
        formatter = logging.Formatter("[%(asctime)s] %(levelname)s in %(module)s: %(message)s")

    # Rotating file handler (5MB x 5)
    file_handler = RotatingFileHandler(
        log_path, maxBytes=5_000_000, backupCount=5, encoding="utf-8"
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    file_handler._tiklive = True
    app.logger.addHandler(file_handler)

    # Stream to stdout as well (useful on dev/heroku/docker)
    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    stream_handler._tiklive = True
    app.logger.addHandler(stream_handler)

    app.logger.info("Logging initialized.")


def create_app(config_object=None):
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(config_object or Config)
    app.config.from_pyfile("config.py", silent=True)

    Path(app.instance_path).mkdir(parents=True, exist_ok=True)

    # Logging must come before extensions so init warnings are captured
    _init_logging(app)
    _init_sentry(app)

    # Extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    csrf.init_app(app)
    mail.init_app(app)

    # ---- Babel init (locale from session/Accept-Language) ----
    def _select_locale():
        # services also run from the CLI and tests with only an app context
        if not has_request_context():
            return app.config.get("BABEL_DEFAULT_LOCALE", "en")
        return (
            session.get("lang")
            or request.accept_languages.best_match(app.config.get("LANGUAGES", ["en"]))
            or app.config.get("BABEL_DEFAULT_LOCALE", "en")
        )
    babel.init_app(app, locale_selector=_select_locale)

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        raise AuthenticationFailed(_("Sign in to continue."))

    init_backend(app)
    if not app.config.get("DATABASE_CONFIGURED"):
        app.logger.warning("No DATABASE_URL configured; public endpoints serve demo data.")

    # Blueprints
    app.register_blueprint(errors_bp)  # error handlers
    app.register_blueprint(proxy_bp)
    app.register_blueprint(main_bp)
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(influencer_bp, url_prefix="/influencer")
    app.register_blueprint(company_bp, url_prefix="/company")
    app.register_blueprint(account_bp, url_prefix="/account")
    app.register_blueprint(admin_bp, url_prefix="/admin")

    @app.cli.command("provision-admin")
    @click.argument("email")
    @click.password_option()
    def provision_admin_command(email, password):
        """Create or promote an admin account with every admin permission."""
        from .services.auth_service import provision_admin
        user = provision_admin(app.extensions["backend"], email, password)
        click.echo(f"Admin {user.email} provisioned.")

    return app
