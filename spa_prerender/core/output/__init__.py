"""
Output Module
=============

Route to file path mapping and writing of rendered pages.
"""
