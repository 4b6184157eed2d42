import os
from flask import Flask, request, redirect, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_cors import CORS
from dotenv import load_dotenv

load_dotenv()

db = SQLAlchemy()
migrate = Migrate()


SERVER_DATABASE_PREFIXES = ('postgresql', 'mysql')


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def create_app(test_config=None):
    app = Flask(__name__)

    is_production = os.getenv('FLASK_ENV') == 'production'

    # Database configuration
    database_url = os.getenv('DATABASE_URL')
    if not database_url:
        if is_production:
            raise RuntimeError('DATABASE_URL environment variable is required in production')
        database_url = 'sqlite:///bp_tracker.db'

    # In production, require a server database
    if is_production and not database_url.startswith(SERVER_DATABASE_PREFIXES):
        raise RuntimeError(
            'Production requires MySQL or PostgreSQL. '
            'DATABASE_URL must start with mysql or postgresql'
        )

    app.config['SQLALCHEMY_DATABASE_URI'] = database_url
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
    if database_url.startswith(SERVER_DATABASE_PREFIXES):
        app.config['SQLALCHEMY_ENGINE_OPTIONS'] = {
            'pool_pre_ping': True,
            'pool_recycle': 300,
        }

    # Reading rules
    app.config['APP_TIMEZONE'] = os.getenv('APP_TIMEZONE', 'Asia/Hong_Kong')
    app.config['DEFAULT_FILTER_DAYS'] = int(os.getenv('DEFAULT_FILTER_DAYS', 14))
    app.config['ENFORCE_UNIQUE_READING_TIME'] = _env_flag('ENFORCE_UNIQUE_READING_TIME', True)
    app.config['EVENT_LOG_FILE'] = os.getenv('EVENT_LOG_FILE', 'logs/events.log')

    # Request size limit (1 MB)
    app.config['MAX_CONTENT_LENGTH'] = 1 * 1024 * 1024

    if test_config is not None:
        app.config.from_mapping(test_config)

    # One normalizer per app, built from APP_TIMEZONE
    from bptracker.utils.datetime_format import DateTimeNormalizer
    app.extensions['bptracker.normalizer'] = DateTimeNormalizer(app.config['APP_TIMEZONE'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # CORS: restrict origins
    allowed_origins = os.getenv('ALLOWED_ORIGINS', '')
    if allowed_origins:
        origins_list = [o.strip() for o in allowed_origins.split(',') if o.strip()]
    elif is_production:
        raise RuntimeError(
            'ALLOWED_ORIGINS environment variable is required in production'
        )
    else:
        # Development: allow localhost variants
        origins_list = [
            'http://localhost:*',
            'http://127.0.0.1:*',
        ]

    CORS(app, resources={
        r"/api/*": {"origins": origins_list}
    })

    # Redirect HTTP to HTTPS in production
    if is_production:
        @app.before_request
        def enforce_https():
            if not request.is_secure and request.headers.get('X-Forwarded-Proto', 'http') != 'https':
                url = request.url.replace('http://', 'https://', 1)
                return redirect(url, code=301)

    # Security headers
    @app.after_request
    def add_security_headers(response):
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['Content-Security-Policy'] = "default-src 'none'; frame-ancestors 'none'"
        response.headers['Cache-Control'] = 'no-store, no-cache, must-revalidate'
        response.headers['Referrer-Policy'] = 'no-referrer'
        if is_production or request.is_secure:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response

    # Validate Content-Type on POST/PUT requests
    @app.before_request
    def validate_content_type():
        if request.method in ('POST', 'PUT') and request.path != '/health':
            content_type = request.content_type or ''
            if 'application/json' not in content_type:
                return jsonify({'error': 'Content-Type must be application/json'}), 415

    # Setup event logging
    from bptracker.utils.event_logger import setup_event_logging
    setup_event_logging(app)

    # Register blueprints
    from bptracker.routes.readings import readings_bp

    app.register_blueprint(readings_bp, url_prefix='/api')

    # Health check endpoint
    @app.route('/health')
    def health():
        return {'status': 'healthy'}, 200

    @app.cli.command('default-window')
    def default_window():
        """Print the default reading filter window in the configured zone."""
        from bptracker.utils.datetime_format import get_normalizer
        from_date, to_date = get_normalizer().default_filter_window(
            days=app.config['DEFAULT_FILTER_DAYS'])
        print(f'{from_date} to {to_date} ({app.config["APP_TIMEZONE"]})')

    return app
