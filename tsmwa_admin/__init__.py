import logging

import click
from flask import Flask, render_template, request

from dotenv import load_dotenv
load_dotenv()

from .config import Config  # noqa: E402
from .errors import DataAccessFailure, RecordNotFound, RouteNotFound  # noqa: E402
from .extensions import db, migrate  # noqa: E402
from .formatting import FILTERS  # noqa: E402

# Application version
APP_VERSION = "0.1.0"


def _configure_logging(app):
    level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)
    app.logger.setLevel(level)
    logging.getLogger("tsmwa_admin").setLevel(level)
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _register_error_handlers(app):
    from .presentation import navigation, section_for_path

    def _nav_context():
        # Error pages have no resolved page; fall back to the URL prefix.
        section = section_for_path(request.path)
        return {"section": section, "breadcrumb": "", "nav_links": navigation(section)}

    @app.errorhandler(RouteNotFound)
    @app.errorhandler(RecordNotFound)
    def not_found(exc):
        app.logger.debug("404 for %s: %s", request.path, exc)
        return render_template("not_found.html", error=exc, **_nav_context()), 404

    @app.errorhandler(DataAccessFailure)
    def data_access_failure(exc):
        app.logger.exception("Data access failure on %s", request.path)
        return render_template("error.html", error=exc, **_nav_context()), 500

    @app.context_processor
    def inject_layout():
        return {
            "nav_links": [],
            "sections": [("Home", "/"), ("Admin", "/admin"), ("TSMWA", "/tsmwa"), ("TWWA", "/twwa")],
            "org_name": app.config.get("ORG_NAME", ""),
            "app_version": app.config.get("APP_VERSION", APP_VERSION),
        }


def _register_cli(app):
    from .scripts.seed_demo_data import add_random_meter_reading, seed_all, wipe_domain_data

    @app.cli.command("seed-demo")
    @click.option("--wipe", is_flag=True, help="Delete existing records first.")
    def seed_demo(wipe):
        """Fill the database with demo records."""
        if wipe:
            wipe_domain_data()
        counts = seed_all(home_state=app.config["INVOICE_STATE"])
        for label, n in counts.items():
            click.echo(f"{label}: {n}")

    @app.cli.command("add-reading")
    def add_reading():
        """Add one random meter reading."""
        reading = add_random_meter_reading()
        click.echo(f"Added meter reading {reading.meter_id}")


def create_app(config_object=None):
    """Application factory for the TSMWA admin.

    Builds the Flask app, binds the database and the data-access handle,
    registers the page blueprint and creates missing tables.
    """
    app = Flask(__name__)
    app.config.from_object(config_object or Config)
    app.config.setdefault("APP_VERSION", APP_VERSION)

    # Postgres via DATABASE_URL; fail loudly if missing
    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL is not set. Refusing to start without a database.")

    _configure_logging(app)

    for name, func in FILTERS.items():
        app.jinja_env.filters[name] = func

    # Initialize extensions (register this app with the shared db instance)
    db.init_app(app)
    migrate.init_app(app, db)

    from .services.data_access import DataAccess

    DataAccess().init_app(app)

    from .routes import bp as main_bp

    app.register_blueprint(main_bp)
    _register_error_handlers(app)
    _register_cli(app)

    with app.app_context():
        from . import models  # noqa: F401  ensure models are registered

        db.create_all()

        if app.config.get("SEED_DEMO_DATA") and db.session.query(models.Membership).first() is None:
            from .scripts.seed_demo_data import seed_all

            seed_all(home_state=app.config["INVOICE_STATE"])
            app.logger.info("Seeded demo data")

    return app
