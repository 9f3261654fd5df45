from .auth import auth_bp
from .schools import schools_bp
from .classrooms import classrooms_bp
from .users import users_bp
from .attendance import attendance_bp
from .reading import reading_bp
from .base_route import base_bp


def register_routes(app):
    app.register_blueprint(base_bp)
    app.register_blueprint(auth_bp, url_prefix='/auth')
    app.register_blueprint(schools_bp, url_prefix='/schools')
    app.register_blueprint(classrooms_bp, url_prefix='/classrooms')
    app.register_blueprint(users_bp, url_prefix='/users')
    app.register_blueprint(attendance_bp, url_prefix='/attendance')
    app.register_blueprint(reading_bp, url_prefix='/reading-paragraphs')
