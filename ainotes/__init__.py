"""
AI Notes backend: a folder/note hierarchy with AI-generated child notes.
"""

__version__ = "1.0.0"
