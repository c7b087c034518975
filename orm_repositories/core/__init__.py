"""
Core utilities shared by the repository and database layers.

This package provides:
- Startup options (drop/create/migrate/seed flags, environment label)
- Logging configuration with context variables
- Repository exception types and argument validation
"""
