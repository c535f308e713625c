# Gunicorn configuration for the BioAlgos API
import multiprocessing

bind = "127.0.0.1:3001"
wsgi_app = "wsgi:app"
workers = multiprocessing.cpu_count() * 2 + 1
worker_class = "sync"
timeout = 30
keepalive = 5
errorlog = "/var/log/bioalgos/gunicorn-error.log"
accesslog = "/var/log/bioalgos/gunicorn-access.log"
loglevel = "info"
