"""
Results Engine
Main Flask application entry point
"""

import logging

from flask import Flask, jsonify
from flask_wtf.csrf import CSRFProtect, CSRFError
from werkzeug.exceptions import HTTPException
from config import Config
from database import db, init_db
from errors import ResultsError

csrf = CSRFProtect()

def configure_logging(app):
    """Configure root logging from the LOG_LEVEL setting"""
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s [%(name)s] %(message)s'
    )
    app.logger.setLevel(level)

def register_error_handlers(app):
    """Render every failure as a structured JSON body"""
    
    @app.errorhandler(ResultsError)
    def handle_results_error(error):
        return jsonify(error.to_dict()), error.status_code
    
    @app.errorhandler(CSRFError)
    def handle_csrf_error(error):
        return jsonify({'success': False, 'error': 'csrf_error', 'message': error.description}), 400
    
    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({
            'success': False,
            'error': (error.name or 'error').lower().replace(' ', '_'),
            'message': error.description
        }), error.code

def create_app(config_class=Config):
    """Application factory pattern"""
    app = Flask(__name__)
    app.config.from_object(config_class)
    
    configure_logging(app)
    
    # Initialize extensions with app
    db.init_app(app)
    csrf.init_app(app)
    
    # Expose a CSRF token for API clients
    @app.route('/api/auth/csrf-token')
    def csrf_token():
        from flask_wtf.csrf import generate_csrf
        return jsonify({'csrf_token': generate_csrf()})
    
    # Register blueprints
    from routes.auth import auth_bp
    from routes.results import results_bp
    from routes.assignments import assignments_bp
    
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(results_bp, url_prefix='/api/results')
    app.register_blueprint(assignments_bp, url_prefix='/api/assignments')
    
    register_error_handlers(app)
    
    from cli_commands import register_cli_commands
    register_cli_commands(app)
    
    # Initialize database
    init_db(app)
    
    return app

if __name__ == '__main__':
    app = create_app()
    app.run(host='0.0.0.0', port=8000, debug=True, use_reloader=False)
