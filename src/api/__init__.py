"""
Read API (FastAPI)

    uvicorn src.api:app
"""
from src.api.app import create_app

app = create_app()

__all__ = ["app", "create_app"]
