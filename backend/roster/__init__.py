# backend/roster/__init__.py
from flask import Flask, request

from .config import Config
from .extensions import db, migrate



def create_app(config_overrides: dict | None = None) -> Flask:
    app = Flask(__name__, instance_relative_config=True)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Import models so Alembic can discover metadata reliably
    from . import models  # noqa: F401

    # Register blueprints
    from .routes.system import system_bp
    from .routes.auth import auth_bp
    from .routes.users import users_bp
    from .routes.duty import duty_bp
    from .routes.disciplinary import disciplinary_bp
    from .routes.promotions import promotions_bp
    from .routes.merit_points import merit_bp
    from .routes.missions import missions_bp
    from .routes.units import units_bp
    from .routes.awards import awards_bp
    from .routes.audit import audit_bp
    from .routes.admin import admin_bp
    from .routes.dashboard import dashboard_bp
    from .routes.ranks import ranks_bp

    app.register_blueprint(system_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(duty_bp)
    app.register_blueprint(disciplinary_bp)
    app.register_blueprint(promotions_bp)
    app.register_blueprint(merit_bp)
    app.register_blueprint(missions_bp)
    app.register_blueprint(units_bp)
    app.register_blueprint(awards_bp)
    app.register_blueprint(audit_bp)
    app.register_blueprint(admin_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(ranks_bp)

    @app.errorhandler(500)
    def internal_error(error):
        # Flask has already logged the traceback via app.logger
        db.session.rollback()
        return {"error": "Internal server error"}, 500

    @app.after_request
    def add_cors_headers(response):
        origin = request.headers.get("Origin")
        allowed_origins = {
            "http://localhost:5173",
            "http://127.0.0.1:5173",
            "http://localhost:4173",
            "http://127.0.0.1:4173",
        }
        if origin in allowed_origins:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"
            response.headers["Access-Control-Allow-Headers"] = "Authorization, Content-Type"
            response.headers["Access-Control-Allow-Methods"] = "GET,POST,PUT,DELETE,PATCH,OPTIONS"
        return response

    # Register CLI commands
    from .cli import register_commands
    register_commands(app)

    return app
