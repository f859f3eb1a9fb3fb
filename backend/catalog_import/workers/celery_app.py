"""Celery application for background catalog imports."""

import ssl

from celery import Celery

from catalog_import.core.config import get_settings
from catalog_import.utils.redis_client import to_tls_url

settings = get_settings()

broker_url = to_tls_url(settings.celery_broker_url or settings.redis_url)
backend_url = to_tls_url(settings.celery_result_url or settings.redis_url)

# Celery's Redis backend reads ssl_cert_reqs from the URL during initialization
is_ssl = broker_url.startswith("rediss://") or backend_url.startswith("rediss://")
if is_ssl:
    ssl_param = "ssl_cert_reqs=none"
    if "ssl_cert_reqs" not in broker_url:
        broker_url = f"{broker_url}{'&' if '?' in broker_url else '?'}{ssl_param}"
    if "ssl_cert_reqs" not in backend_url:
        backend_url = f"{backend_url}{'&' if '?' in backend_url else '?'}{ssl_param}"

celery_app = Celery(
    "catalog_import",
    broker=broker_url,
    backend=backend_url,
)

celery_config = {
    "task_serializer": "json",
    "accept_content": ["json"],
    "result_serializer": "json",
    "timezone": "UTC",
    "enable_utc": True,
    "task_acks_late": True,
    "task_reject_on_worker_lost": True,
    # Imports are sequential by design; one task at a time per worker
    "worker_prefetch_multiplier": 1,
    "task_time_limit": 3600,
    "task_soft_time_limit": 3300,
    "result_expires": 3600,
    "broker_connection_retry_on_startup": True,
    "worker_hijack_root_logger": False,
    "task_default_queue": "imports",
    "task_routes": {
        "catalog_import.workers.tasks.execute_import": {"queue": "imports"},
    },
}

if is_ssl:
    ssl_dict = {"ssl_cert_reqs": ssl.CERT_NONE}
    celery_config.update(
        {
            "broker_use_ssl": ssl_dict,
            "redis_backend_use_ssl": ssl_dict,
            "broker_transport_options": ssl_dict.copy(),
            "result_backend_transport_options": ssl_dict.copy(),
        }
    )

celery_app.conf.update(celery_config)

# Register tasks with the app
from catalog_import.workers.tasks import execute_import  # noqa: E402,F401
