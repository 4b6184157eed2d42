"""
Flask development server entry point.
"""
import os
from bptracker import create_app

app = create_app()

if __name__ == '__main__':
    host = os.getenv('FLASK_HOST', '0.0.0.0')
    port = int(os.getenv('FLASK_PORT', 3000))
    is_production = os.getenv('FLASK_ENV') == 'production'
    debug = not is_production

    ssl_context = None
    cert_path = os.getenv('SSL_CERT_PATH')
    key_path = os.getenv('SSL_KEY_PATH')

    if cert_path and key_path and os.path.exists(cert_path) and os.path.exists(key_path):
        ssl_context = (cert_path, key_path)

    print(f'Server is running on http://{host}:{port}')
    print(f'API is available at http://{host}:{port}/api')

    app.run(
        host=host,
        port=port,
        debug=debug,
        ssl_context=ssl_context
    )
