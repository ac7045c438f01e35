"""
HTTP API.

``create_app`` in portfolio.api.app builds the FastAPI application;
portfolio.main holds the process-level instance.
"""
