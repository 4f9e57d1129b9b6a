"""
Core Pre-rendering Logic
========================

Modules:
- errors: Error taxonomy shared by every stage
- output: Route to file path mapping and HTML file writes
- rendering: Browser launch, traffic filtering and single-route rendering
- scheduler: Batched, bounded-concurrency rendering of the route list
- server: Temporary static server for the build directory
- pipeline: Orchestration of a complete pre-render run
"""
