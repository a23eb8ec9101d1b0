"""
FastAPI REST Endpoints
======================

REST API endpoints for HTTP access to card rendering.

Endpoints:
- POST /api/screenshot: Render a card to PNG
- POST /api/card-size: Measure a rendered card
- GET /health: Health check endpoint
"""
