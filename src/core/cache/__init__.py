"""
Cache Module
============

In-memory result cache shared by all requests.

Components:
- keys: Namespaced cache keys derived from render requests
- store: Byte-budgeted, time-expiring LRU store
"""
