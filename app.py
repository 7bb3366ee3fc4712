"""
Academic Report Engine
Main Flask application entry point
"""

from flask import Flask
from config import Config
from database import db, init_db
from utils.logger import set_level

def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)
    set_level(app.config.get('LOG_LEVEL', 'INFO'))

    # Initialize extensions with app
    db.init_app(app)

    # Register blueprints
    from routes.reports import reports_bp

    app.register_blueprint(reports_bp, url_prefix='/reports')

    # Initialize database
    init_db(app)

    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=8000, debug=True, use_reloader=False)
