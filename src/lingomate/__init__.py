"""LingoMate language-exchange backend.

This package contains the session, friend-graph, recommendation and chat
bridge services together with the FastAPI surface that exposes them.
"""

__version__ = "0.1.0"
