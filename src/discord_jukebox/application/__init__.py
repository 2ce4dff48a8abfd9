"""
Application Layer

Contains use cases, command/query handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: write operations (PlayTrackCommand, SkipTrackCommand, etc.)
- queries/: read operations (GetQueueQuery, GetCurrentTrackQuery)
- services/: playback controller, idle monitor and queue service
- interfaces/: Port interfaces for infrastructure adapters
"""
