"""FastAPI routes for Milepost."""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from milepost import __version__
from milepost.application import ItemUpdate, RoadmapOverview, RoadmapSession
from milepost.config import Settings, get_settings
from milepost.domain.roadmap import NodeInsight
from milepost.domain.shared import Err
from milepost.infrastructure.storage import RoadmapRepository
from milepost.interfaces.api.schemas import SaveRoadmapRequest, SaveRoadmapResponse, ServiceInfo

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "roadmap-export.json"


# =============================================================================
# Dependencies
# =============================================================================


def get_repository(request: Request) -> RoadmapRepository:
    return request.app.state.repository


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_session(
    repository: RoadmapRepository = Depends(get_repository),
    settings: Settings = Depends(get_app_settings),
) -> RoadmapSession:
    """Load the stored tree into a fresh session for this request."""
    result = repository.load()
    if isinstance(result, Err):
        logger.error(f"Failed to load roadmap: {result.error}")
        raise HTTPException(status_code=500, detail="Failed to load roadmap data")
    return RoadmapSession(result.value.roadmap, strict_transitions=settings.strict_transitions)


# =============================================================================
# Router
# =============================================================================


router = APIRouter(prefix="/api")


@router.get("/roadmap")
def get_roadmap(repository: RoadmapRepository = Depends(get_repository)):
    """Return the whole stored document."""
    result = repository.load()
    if isinstance(result, Err):
        logger.error(f"Failed to load roadmap: {result.error}")
        raise HTTPException(status_code=500, detail="Failed to load roadmap data")
    return result.value.to_json()


@router.post("/roadmap", response_model=SaveRoadmapResponse)
def save_roadmap(
    req: SaveRoadmapRequest,
    repository: RoadmapRepository = Depends(get_repository),
):
    """Replace the whole stored tree."""
    result = repository.save(req.roadmap)
    if isinstance(result, Err):
        raise HTTPException(status_code=500, detail="Failed to save roadmap data")
    return SaveRoadmapResponse(data=result.value.to_json())


@router.put("/roadmap/item/{item_id}", response_model=SaveRoadmapResponse)
def update_item(
    item_id: str,
    update: ItemUpdate,
    session: RoadmapSession = Depends(get_session),
    repository: RoadmapRepository = Depends(get_repository),
):
    """Apply a partial edit to one item and store the tree."""
    result = session.edit_item(item_id, update)
    if isinstance(result, Err):
        status_code = 404 if session.get(item_id) is None else 409
        raise HTTPException(status_code=status_code, detail=result.error)

    saved = repository.save(session.root)
    if isinstance(saved, Err):
        raise HTTPException(status_code=500, detail="Failed to update item")
    return SaveRoadmapResponse(data=saved.value.to_json())


@router.get("/roadmap/item/{item_id}/insight", response_model=NodeInsight)
def get_item_insight(item_id: str, session: RoadmapSession = Depends(get_session)):
    """Derived progress, divergence and suggested status for one item."""
    result = session.insight(item_id)
    if isinstance(result, Err):
        raise HTTPException(status_code=404, detail=result.error)
    return result.value


@router.get("/roadmap/divergent", response_model=list[NodeInsight])
def list_divergent(session: RoadmapSession = Depends(get_session)):
    """Items whose status disagrees with their progress."""
    return session.divergent_nodes()


@router.get("/roadmap/overview", response_model=RoadmapOverview)
def get_overview(session: RoadmapSession = Depends(get_session)):
    """Summary counters for the whole roadmap."""
    return session.overview()


@router.get("/roadmap/export")
def export_roadmap(session: RoadmapSession = Depends(get_session)):
    """Download the tree as ``{"roadmap": ...}``."""
    return JSONResponse(
        content=session.export_document(),
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


# =============================================================================
# App Factory
# =============================================================================


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create the FastAPI application."""
    settings = settings or get_settings()
    repository = RoadmapRepository(settings.data_file)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Seed and migrate the data file before serving requests."""
        result = repository.initialize(settings.default_title, seed=settings.seed_on_init)
        if isinstance(result, Err):
            logger.error(f"Roadmap initialization failed: {result.error}")
        else:
            logger.info(f"Serving roadmap from {repository.data_file}")
        yield

    app = FastAPI(
        title="Milepost",
        description="Roadmap tracking with derived progress and status checks",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.repository = repository

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.get("/", response_model=ServiceInfo)
    def root():
        return ServiceInfo(name="Milepost", version=__version__)

    return app
