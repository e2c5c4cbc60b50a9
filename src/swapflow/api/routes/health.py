"""Health check endpoints."""

from fastapi import APIRouter

from swapflow import __version__
from swapflow.chains import evm_chain_ids
from swapflow.config import get_settings

router = APIRouter()


@router.get("/health")
async def health_check():
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "swapflow"}


@router.get("/health/detailed")
async def detailed_health():
    """Health check with configuration and swappable chains."""
    settings = get_settings()
    return {
        "status": "healthy",
        "service": "swapflow",
        "version": __version__,
        "swap_chains": evm_chain_ids(),
        "config": settings.get_safe_dict(),
    }
