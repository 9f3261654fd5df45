from flask import Flask

from .config import Config
from .errors import register_error_handlers
from .extensions import db, jwt, limiter, migrate, cors, dispatcher, sms_gateway, translator
from .utils.logging import configure_logging


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)
    configure_logging(app)

    db.init_app(app)
    jwt.init_app(app)
    cors.init_app(app, origins=app.config["CORS_ORIGINS"], supports_credentials=True)
    limiter.init_app(app)
    migrate.init_app(app, db)
    dispatcher.init_app(app)
    sms_gateway.init_app(app)
    translator.init_app(app)

    from .models import TokenBlocklist
    from .routes import register_routes

    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload):
        jti = jwt_payload["jti"]
        token = db.session.query(TokenBlocklist).filter_by(jti=jti).first()
        return token is not None

    @jwt.revoked_token_loader
    def revoked_token_callback(jwt_header, jwt_payload):
        return {"error": "Token has been revoked"}, 401

    @jwt.unauthorized_loader
    def missing_token_callback(reason):
        return {"error": reason}, 401

    @jwt.invalid_token_loader
    def invalid_token_callback(reason):
        return {"error": reason}, 401

    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return {"error": "Token has expired"}, 401

    register_error_handlers(app)
    register_routes(app)

    with app.app_context():
        db.create_all()

    return app
