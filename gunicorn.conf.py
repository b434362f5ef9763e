# gunicorn.conf.py
"""
Gunicorn configuration for the autoledger API.

Run with: gunicorn autoledger.wsgi -c gunicorn.conf.py
Settings can be overridden through GUNICORN_* environment variables.
"""
import multiprocessing
import os

# Server socket
bind = os.environ.get('GUNICORN_BIND', '0.0.0.0:8000')

# Worker processes
# Invoice generation holds row locks briefly; sync workers keep one request per connection.
workers = int(os.environ.get('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = 'sync'
timeout = int(os.environ.get('GUNICORN_TIMEOUT', 60))
keepalive = 5
max_requests = 1000
max_requests_jitter = 50

wsgi_app = 'autoledger.wsgi:application'
preload_app = True

# Logging
accesslog = '-'  # stdout
errorlog = '-'   # stderr
loglevel = os.environ.get('GUNICORN_LOG_LEVEL', 'info')
access_log_format = '%(h)s %(t)s "%(r)s" %(s)s %(b)s %(D)s tenant=%({x-tenant-id}i)s'

proc_name = 'autoledger-gunicorn'

graceful_timeout = 30

# TLS terminates at the load balancer
forwarded_allow_ips = os.environ.get('GUNICORN_FORWARDED_ALLOW_IPS', '127.0.0.1')
secure_scheme_headers = {
    'X-FORWARDED-PROTO': 'https',
}
