"""
Infrastructure layer - external service integrations.

Each subdirectory wraps an external dependency or runtime concern:
- firestore: Media record persistence
- tasks: Delayed one-shot tasks on the event loop

These wrappers translate between external formats and our domain models.
"""
