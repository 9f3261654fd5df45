from flask_sqlalchemy import SQLAlchemy
from flask_jwt_extended import JWTManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_migrate import Migrate
from flask_cors import CORS
from schoolhub.background import BackgroundDispatcher
from schoolhub.services.sms import SMSGateway
from schoolhub.services.translation import TranslationGateway
from schoolhub.utils.logging import log_rate_limit_violation

db = SQLAlchemy()
jwt = JWTManager()
migrate = Migrate()
cors = CORS()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["200000 per day", "6000 per hour"],
    on_breach=log_rate_limit_violation
)
dispatcher = BackgroundDispatcher()
sms_gateway = SMSGateway()
translator = TranslationGateway()
