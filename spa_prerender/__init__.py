"""
SPA Prerender
=============

Pre-render a single-page application into static HTML files.

This package provides:
- A temporary static server for the application's build directory
- Headless browser rendering with Playwright
- Batched, bounded-concurrency rendering of every configured route
- Route to file-system path mapping for the rendered snapshots
"""

__version__ = "1.0.0"
__author__ = "SPA Prerender Team"
