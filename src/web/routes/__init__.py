"""라우트 Blueprint 등록"""
from flask import Flask


def register_blueprints(app: Flask):
    from .api_forecast import forecast_bp

    app.register_blueprint(forecast_bp, url_prefix="/api")
