"""
Render Routes
=============

FastAPI routes for card screenshots and card measurement.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import Response

from src.api.dependencies import get_orchestrator
from src.core.orchestrator import RenderOrchestrator
from src.models.schemas import CardSize, RenderRequest

router = APIRouter(prefix="/api", tags=["Rendering"])


@router.post(
    "/screenshot",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}, "description": "Rendered card"}},
)
async def screenshot(
    request: RenderRequest, orchestrator: RenderOrchestrator = Depends(get_orchestrator)
) -> Response:
    """Render the requested card and return it as a PNG."""
    png = await orchestrator.screenshot(request)
    return Response(content=png, media_type="image/png")


@router.post("/card-size", response_model=CardSize)
async def card_size(
    request: RenderRequest, orchestrator: RenderOrchestrator = Depends(get_orchestrator)
) -> CardSize:
    """Return the rendered card's width and height without capturing it."""
    return await orchestrator.card_size(request)
