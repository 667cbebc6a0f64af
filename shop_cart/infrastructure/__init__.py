"""
Infrastructure Layer

Contains all external dependencies and implementations:
- Database implementations
- Cart persistence adapters and blob storage
- Configuration management
- Logging infrastructure
- Sync scheduling and notifications
"""
