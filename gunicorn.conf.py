"""
Gunicorn configuration for production deployment.

    gunicorn app.main:app -c gunicorn.conf.py

Each worker runs one event loop and opens its own MongoDB pool in the
application lifespan.
"""
import multiprocessing
import os

# Server socket
bind = f"0.0.0.0:{os.getenv('PORT', '5000')}"
backlog = 2048

# Worker processes
workers = int(os.getenv("WEB_CONCURRENCY", min(multiprocessing.cpu_count() * 2 + 1, 4)))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker lifecycle
max_requests = 1000
max_requests_jitter = 100

# Timeouts
timeout = 30
keepalive = 5
graceful_timeout = 30  # Lifespan shutdown closes the Mongo client within this window

# Honour X-Forwarded-* from the load balancer
forwarded_allow_ips = "*" if os.getenv("TRUST_PROXY", "true").lower() in ("1", "true", "yes") else "127.0.0.1"

# Process naming
proc_name = "job_tracker_api"

# Logging (per-request lines come from the app's request middleware)
accesslog = None
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()


def when_ready(server):
    server.log.info("Job tracker API listening on %s with %s workers", bind, workers)


def worker_int(worker):
    worker.log.info("Worker %s received INT or QUIT signal", worker.pid)


def worker_exit(server, worker):
    server.log.info("Worker %s exited", worker.pid)
