import logging
from datetime import date
from typing import Callable, Optional

from flask import Flask, jsonify
from sqlalchemy import text

from lending.core import config
from lending.core.api_utils import error_response
from lending.core.exceptions import LendingError
from lending.core.logging_config import setup_logging
from lending.db.session import create_tables, get_engine
from lending.services.loan_ledger import LoanLedger
from lending.services.scoped import (
    SessionScopedCatalog,
    SessionScopedMembership,
    load_records,
    save_records,
)

logger = logging.getLogger(__name__)


def test_database_connection():
    """Test database connection"""
    try:
        with get_engine().connect() as connection:
            connection.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(
            "Database connection failed",
            extra={"context": {"error": str(e)}},
            exc_info=True,
        )
        return False


def build_ledger(clock: Optional[Callable[[], date]] = None) -> LoanLedger:
    """Create the application's single loan ledger, loaded from the database."""
    kwargs = {"clock": clock} if clock is not None else {}
    ledger = LoanLedger(
        SessionScopedCatalog(),
        SessionScopedMembership(),
        records=load_records(),
        persist=save_records,
        **kwargs,
    )
    logger.info(
        "Loan ledger loaded",
        extra={"context": {"records": len(ledger.all_records())}},
    )
    return ledger


def create_app(clock: Optional[Callable[[], date]] = None) -> Flask:
    """Application factory.

    Args:
        clock: Optional replacement for the ledger's "today" (used by tests)
    """
    app = Flask(__name__)
    testing = config.is_testing()
    if testing:
        app.config["TESTING"] = True

    setup_logging(
        app,
        log_level=config.LOG_LEVEL,
        log_to_file=config.LOG_TO_FILE and not testing,
        use_json_format=config.LOG_JSON,
    )
    config.log_timezone_config()

    create_tables()
    app.extensions["loan_ledger"] = build_ledger(clock)

    from lending.controllers.book_controller import book_bp
    from lending.controllers.loan_controller import loan_bp
    from lending.controllers.user_controller import user_bp

    app.register_blueprint(book_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(loan_bp)

    @app.errorhandler(LendingError)
    def handle_lending_error(error):
        return error_response(error)

    @app.route("/health")
    def health_check():
        """Health check endpoint"""
        db_status = test_database_connection()
        return jsonify(
            {
                "status": "healthy" if db_status else "unhealthy",
                "database": "connected" if db_status else "disconnected",
            }
        ), (200 if db_status else 503)

    return app
