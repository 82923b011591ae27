# boutique/health.py
from fastapi import APIRouter

from boutique.config import get_settings

router = APIRouter()

@router.get("/health")
def health():
    settings = get_settings()
    return {"ok": True, "store": "memory" if settings.use_mock_data else "remote"}

@router.get("/mcp/info")
def mcp_info():
    return {"status":"ok","transport":"streamable-http","path":"/mcp"}
