"""Gunicorn configuration for serving course_intel.server.

Run with: gunicorn -c gunicorn_conf.py "course_intel.server:get_app()"
"""

import os

# Bind configuration
port = os.environ.get("PORT", "8080")
bind = f"0.0.0.0:{port}"

# Worker configuration
# Each research run owns a headless Chromium, so keep workers low
workers = int(os.environ.get("GUNICORN_WORKERS", "1"))
worker_class = "uvicorn.workers.UvicornWorker"

# Timeout configuration
# A research run takes seconds to minutes per platform
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "1800"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "60"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

# Logging configuration
loglevel = os.environ.get("GUNICORN_LOG_LEVEL", "info")
accesslog = "-"
errorlog = "-"

preload_app = True
backlog = 256

# Recycle workers to release browser memory
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "200"))
max_requests_jitter = int(os.environ.get("GUNICORN_MAX_REQUESTS_JITTER", "20"))
