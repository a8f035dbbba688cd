"""
Games module - Game content.

Each game has its own subpackage with:
- Card and company definitions
- The catalog provider the engine queries
- Setup and dealing
"""
