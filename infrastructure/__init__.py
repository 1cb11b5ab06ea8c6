"""
Infrastructure Package
======================

Provides abstraction layers for external dependencies following the Dependency Inversion Principle.

Modules:
    - images: Remote image store abstraction (Cloudinary, in-memory)
    - events: Domain event bus (Redis pub/sub, in-memory)
    - container: Service locator wiring adapters into the domain services

This package enables:
    - Easy testing with in-memory implementations
    - Switching between providers without code changes
    - Loose coupling between business logic and infrastructure
"""
