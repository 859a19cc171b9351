"""
Diamond League - Baseball Game Simulation API
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from diamond.config import settings
from diamond.database import init_db
from diamond.logging_config import configure_logging
from diamond.api.teams import router as teams_router
from diamond.api.games import router as games_router
from diamond.api.seasons import router as seasons_router

# Initialize FastAPI app
app = FastAPI(
    title="Diamond League",
    description="Baseball Game Simulation API",
    version="0.1.0",
)

# Local frontend dev servers
default_origins = [
    "http://localhost:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5173",
    "http://127.0.0.1:5174",
]

# Add custom origins from environment (comma-separated)
if settings.CORS_ORIGINS:
    default_origins.extend([o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()])

app.add_middleware(
    CORSMiddleware,
    allow_origins=default_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(teams_router, prefix="/api")
app.include_router(games_router, prefix="/api")
app.include_router(seasons_router, prefix="/api")


@app.on_event("startup")
def startup_event():
    """Set up logging and the database on startup"""
    configure_logging()
    init_db()


@app.get("/")
def root():
    """Health check endpoint"""
    return {
        "name": "Diamond League API",
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/health")
def health_check():
    """API health check"""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
