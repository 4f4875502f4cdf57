"""Workers package: Celery app and background task definitions.

Public API:
- `celery_app`: Celery application instance and configuration
- `tasks`: task implementations (e.g. `generate_turn_feedback`)
"""
import importlib


# Lazy imports so the web process only loads Celery when it schedules work
def __getattr__(name):
    if name == "celery_app":
        from .celery_app import app
        return app
    elif name == "tasks":
        return importlib.import_module(f"{__name__}.tasks")
    elif name == "generate_turn_feedback":
        from .tasks import generate_turn_feedback
        return generate_turn_feedback
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    "celery_app",
    "tasks",
    "generate_turn_feedback",
]
