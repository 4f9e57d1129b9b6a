"""
Configuration Management
=======================

Environment-based runtime settings and the render configuration file.

Components:
- settings: Runtime settings from environment variables (Pydantic Settings)
- logging: Structured logging configuration
- loader: Reading and validating the `.rsp.json` render configuration
"""
