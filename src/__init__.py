"""
OBS CMS media intake - records media upload notifications in Firestore.

This package contains the complete application:
- core: Framework-agnostic intake logic
- infrastructure: Firestore persistence and deferred task scheduling
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
