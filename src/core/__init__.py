"""
Core business logic for media intake.

This module is framework-agnostic - it doesn't import FastAPI, Firestore,
or any infrastructure concerns. That separation means the intake rules
can be tested in isolation with in-memory collaborators.
"""
