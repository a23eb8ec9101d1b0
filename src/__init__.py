"""
Card Render Service
===================

HTTP service that renders parameterized card templates into cropped PNG
images by driving a headless browser.

This package provides:
- FastAPI REST endpoints for screenshots and card measurement
- A byte-budgeted, time-expiring result cache
- Content preparation (Markdown conversion, translation and icon injection)
- Browser automation with Playwright behind a narrow page interface
- A retrying request orchestrator
"""

__version__ = "1.0.0"
__author__ = "Card Render Team"
