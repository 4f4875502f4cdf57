"""Celery app configuration."""
import logging

import pytz
from celery import Celery
from celery.signals import after_setup_logger
from kombu import Exchange, Queue

import config
from utils.logging_utils import configure_logging

logger = logging.getLogger(__name__)

# Initialize Celery app
app = Celery("word_bingo")

app.config_from_object({
    "broker_url": config.CELERY_BROKER_URL,
    "result_backend": config.CELERY_RESULT_BACKEND,
    "task_serializer": "json",
    "accept_content": ["json"],
    "result_serializer": "json",
    "timezone": pytz.UTC,
    "enable_utc": True,
    "task_acks_late": True,
    "worker_prefetch_multiplier": 1,
    # feedback is only useful right after the turn it describes
    "result_expires": 60 * 60,
})

# Define queues
default_exchange = Exchange("default", type="direct")
feedback_exchange = Exchange("feedback", type="direct")

app.conf.task_queues = (
    Queue("default", exchange=default_exchange, routing_key="default"),
    Queue("feedback", exchange=feedback_exchange, routing_key="feedback"),
)

# Default queue for tasks without explicit routing
app.conf.task_default_queue = "default"
app.conf.task_default_exchange = "default"
app.conf.task_default_routing_key = "default"

# Workers import the task module on startup (`celery -A workers.celery_app worker -Q feedback`)
app.conf.imports = ("workers.tasks",)

# Task configuration defaults
app.conf.task_default_retry_delay = 5
app.conf.task_max_retries = 3


@after_setup_logger.connect
def _redact_worker_logs(logger=None, **kwargs):
    configure_logging()


# NOTE: Stores are NOT initialized here at module import time.
# Each task opens its own store inside its own event loop (see workers.tasks);
# a connection created in one loop cannot be reused from another.
