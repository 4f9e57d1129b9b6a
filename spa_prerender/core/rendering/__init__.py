"""
Rendering Module
===============

Browser automation for pre-rendering routes.

Components:
- browser: Playwright driver and shared browser lifecycle
- traffic_filter: Per-request allow/abort policy
- page_renderer: Single-route navigation and DOM serialization
"""
