"""
Data Models
===========

Pydantic data models for request/response validation and internal data structures.

Models:
- schemas: render request, card size, bounding box and error schemas
"""
