"""
Data Models
===========

Pydantic models for the render configuration, render results and run reports.
"""
