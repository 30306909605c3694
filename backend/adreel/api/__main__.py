"""API server entry point for python -m adreel.api"""
import uvicorn
from adreel.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "adreel.api.app:app",
        host=settings.server.host,
        port=settings.server.port,
        reload=False,
    )
