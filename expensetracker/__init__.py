import logging

from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError

from .extensions import db, migrate, login_manager, jwt, cors
from .config import get_config
from .errors import register_error_handlers
from .cli import register_commands, seed_default_categories

from .blueprints.users.routes import users_bp
from .blueprints.expenses.routes import expenses_bp
from .blueprints.categories.routes import categories_bp
from .blueprints.budgets.routes import budgets_bp

logger = logging.getLogger(__name__)


def create_app(config_class=None):
    app = Flask(__name__)
    app.config.from_object(config_class or get_config())

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})

    # Ensure tables exist for a smooth first run
    with app.app_context():
        db.create_all()
        try:
            seed_default_categories()
        except SQLAlchemyError:
            # Do not block app startup if seeding fails
            db.session.rollback()
            logger.exception("Seeding default categories failed")

    # Register blueprints
    app.register_blueprint(users_bp)
    app.register_blueprint(expenses_bp)
    app.register_blueprint(categories_bp)
    app.register_blueprint(budgets_bp)

    register_error_handlers(app)
    register_commands(app)

    @app.route("/")
    def root():
        return jsonify({"message": "Expense Tracker API is running"})

    return app
