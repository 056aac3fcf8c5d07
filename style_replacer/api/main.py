"""Smart Style Replacer API.

Serves compilation step metadata and runs steps over scene content:
- Step discovery (name, description, option schema)
- Option presets
- Step execution
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from style_replacer import __version__
from style_replacer.api.routes import steps
from style_replacer.steps.registry import get_step_registry

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: Pre-load the registry
    logger.info("Loading step definitions...")
    step_registry = get_step_registry()
    logger.info(
        f"Loaded {step_registry.count()} steps, "
        f"{len(step_registry.list_preset_keys())} presets"
    )

    logger.info("Smart Style Replacer API ready")
    yield
    # Shutdown
    logger.info("Shutting down Smart Style Replacer API")


# Create FastAPI app
app = FastAPI(
    title="Smart Style Replacer API",
    description="""
## Scene Compilation Steps

Rewrites scene lines that start with a marker into Pandoc fenced divs
carrying a custom paragraph style (DOCX `custom-style` and EPUB/HTML class).

### Key Endpoints

- `GET /v1/steps` - List all steps
- `GET /v1/steps/{key}` - Get step metadata and options
- `GET /v1/steps/presets` - List option presets
- `POST /v1/steps/{key}/execute` - Run a step over scenes
""",
    version=__version__,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers with /v1 prefix
app.include_router(steps.router, prefix="/v1")


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "service": "Smart Style Replacer API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "steps": "/v1/steps",
            "presets": "/v1/steps/presets",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    step_registry = get_step_registry()
    return {
        "status": "healthy",
        "steps_loaded": step_registry.count(),
        "presets_loaded": len(step_registry.list_preset_keys()),
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "style_replacer.api.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
    )
