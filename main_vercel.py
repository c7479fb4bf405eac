"""Serverless entrypoint: exposes the Roster API app at the repo root."""

from backend.main import app

__all__ = ["app"]
