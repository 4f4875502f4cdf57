import os

# Redis connection used for game records, locks and generated feedback.
REDIS_URL = os.environ.get("BINGO_REDIS_URL", "redis://localhost:6379/0")

# Use the in-process store instead of Redis (local runs without a server).
USE_MEMORY_STORE = os.environ.get("BINGO_USE_MEMORY_STORE", "").lower() in ("1", "true", "yes")

# Game records expire after this many seconds without a write.
GAME_EXPIRATION_SECONDS = int(os.environ.get("BINGO_GAME_EXPIRATION_SECONDS", 60 * 60 * 2))

# Lock keys self-expire so a crashed holder cannot block a game forever.
LOCK_TIMEOUT_SECONDS = int(os.environ.get("BINGO_LOCK_TIMEOUT_SECONDS", 5))

CELERY_BROKER_URL = os.environ.get("CELERY_BROKER_URL", "redis://localhost:6379/1")
CELERY_RESULT_BACKEND = os.environ.get("CELERY_RESULT_BACKEND", "redis://localhost:6379/2")

# Queue post-turn feedback generation on the Celery worker after each call.
FEEDBACK_ENABLED = os.environ.get("BINGO_FEEDBACK_ENABLED", "true").lower() in ("1", "true", "yes")
OPENAI_LLM_MODEL = os.environ.get("OPENAI_LLM_MODEL", "gpt-4o-mini")
FEEDBACK_FALLBACK = os.environ.get("BINGO_FEEDBACK_FALLBACK", "What a great move!")

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get("BINGO_ALLOWED_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
