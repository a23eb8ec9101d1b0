"""
Core Business Logic
==================

Core business logic modules for card rendering.

Modules:
- cache: Byte-budgeted, time-expiring result cache
- rendering: Content preparation, viewport negotiation, browser automation
- orchestrator: Cache lookup, retry policy and result admission
"""
