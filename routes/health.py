from fastapi import APIRouter

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness probe for load balancers and agent clients."""
    return {"status": "ok", "service": "battleship"}
