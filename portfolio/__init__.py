"""
Portfolio backend - content, projects and gated downloads for a
personal portfolio site.
"""

__version__ = "0.1.0"
