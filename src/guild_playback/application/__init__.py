"""
Application Layer

Contains use cases and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: Write operations (PlayTrackCommand)
- services/: Background resolution pipeline and progress throttling
- interfaces/: Port interfaces for infrastructure adapters
"""
