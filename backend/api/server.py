"""
api/server.py
-------------
FastAPI application entry point.

Run dev server:
    cd backend
    uvicorn api.server:app --reload --port 8000

Endpoints:
    GET  /v1/health
    GET  /v1/attractions
    GET  /v1/attractions/categories
    POST /v1/attractions/refresh
    GET  /v1/attractions/{id}
    GET  /v1/attractions/{id}/summary
    POST /v1/chat/sessions
    GET  /v1/chat/sessions/{session_id}
    POST /v1/chat/sessions/{session_id}/messages
    DELETE /v1/chat/sessions/{session_id}
"""
from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import attractions, chat, health

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Taipei Explorer API",
    version="1.0.0",
    description=(
        "Search Taipei's open attractions dataset, get AI travel tips, "
        "and chat with a search-grounded Gemini travel assistant."
    ),
    docs_url="/docs",
    redoc_url="/redoc",
)

# Allow the browser frontend (any origin during development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router,      prefix="/v1",             tags=["Health"])
app.include_router(attractions.router, prefix="/v1/attractions", tags=["Attractions"])
app.include_router(chat.router,        prefix="/v1/chat",        tags=["Chat"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("api.server:app", host="0.0.0.0", port=8000, reload=True)
