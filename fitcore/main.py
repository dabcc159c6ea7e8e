"""Main entry point for fitcore.

Usage:
    Development: uvicorn fitcore.main:app --reload --port 8000
    Production: uvicorn fitcore.main:app --host 0.0.0.0 --port 8000 --workers 4
"""

from fitcore.api import create_app

app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fitcore.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info",
    )
