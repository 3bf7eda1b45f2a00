"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from .routes import dataset, schemas

app = FastAPI(
    title="Contentful to Sanity API",
    description="API for converting Contentful exports to Sanity schemas and datasets",
    version=__version__,
)

# CORS middleware for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173", "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(schemas.router, prefix="/api/schemas", tags=["schemas"])
app.include_router(dataset.router, prefix="/api/dataset", tags=["dataset"])


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
