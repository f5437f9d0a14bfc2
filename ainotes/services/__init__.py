"""
Domain services: hierarchy mutations, AI processing, tree derivation.
"""

from ainotes.services.hierarchy import UNSET, HierarchyService
from ainotes.services.processor import ProcessingService
from ainotes.services.tree import build_tree

__all__ = ["HierarchyService", "ProcessingService", "UNSET", "build_tree"]
