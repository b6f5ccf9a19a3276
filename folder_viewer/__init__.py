from flask import Flask
from flask_cors import CORS

from .config import Config


def create_app(testing: bool = False, services=None):
    app = Flask(__name__)
    app.config["TESTING"] = testing

    # In development, allow all origins for easier testing
    if Config.FLASK_ENV == "development" and not testing:
        CORS(app)
    else:
        CORS(app, origins=[Config.CLIENT_URL])

    if services is None:
        from .services.container import create_services
        services = create_services()
    app.extensions["services"] = services

    @app.get("/")
    def index():
        return "Folder Structure Viewer API is running."

    from .routes import bp as api_bp
    app.register_blueprint(api_bp, url_prefix="/api")

    return app

