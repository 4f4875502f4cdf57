from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import config
import stores
from routes import games_router, sessions_router
from utils.logging_utils import configure_logging

configure_logging()

# --- FastAPI setup ---
app = FastAPI(title="Word Bingo")

# --- Middleware ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["POST", "GET"],
    allow_headers=["*"],
)


@app.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


# --- Register routes ---
app.include_router(sessions_router, prefix="/games")
app.include_router(games_router, prefix="/games")


@app.on_event("startup")
async def startup_event():
    await stores.init_stores()


@app.on_event("shutdown")
async def shutdown_event():
    await stores.close_stores()
