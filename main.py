"""Main entry point for the FastAPI application."""

import os

import uvicorn

from restapi.router import create_app

app = create_app()

if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=int(os.getenv("PORT", "5000")), reload=True)
