"""
Rendering Module
===============

Card preparation and capture with browser automation.

Components:
- content: Markdown conversion and post-navigation page mutations
- viewport: Viewport growth to fit the measured card
- page: Page capability interface the executor drives
- browser_pool: Playwright adapter and worker pool
- executor: Single render/measure job execution
"""
