"""
API routers package.
Each router handles a specific domain of endpoints.
"""

from ainotes.routers import folders, items, processing

__all__ = [
    "folders",
    "items",
    "processing",
]
