"""
Centralized Blueprint Registration
All blueprints MUST be registered inside register_all_blueprints(app)
"""
import logging

logger = logging.getLogger(__name__)


def register_all_blueprints(app):

    # API
    from fertilizer_ordering.routes.auth.auth_routes import auth_bp
    from fertilizer_ordering.routes.farmer.farmer_routes import farmer_bp
    from fertilizer_ordering.routes.admin.admin_routes import admin_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(farmer_bp)
    app.register_blueprint(admin_bp)

    # Root (health + frontend catch-all) goes last
    from fertilizer_ordering.routes.root.root_routes import root_bp
    app.register_blueprint(root_bp)

    logger.debug("All blueprints registered")
