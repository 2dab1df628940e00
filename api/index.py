# Serverless entry point: the host imports the module-level ``app``.
from splitledger.app import create_app
from splitledger.logging_config import configure_logging

configure_logging()
app = create_app()

# Vercel ignores this block, but it's useful for local testing
if __name__ == '__main__':
    app.run(debug=True, port=5000)
