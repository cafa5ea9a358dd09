"""
db/ - Database Layer
====================
Handles all PostgreSQL connections, transactions and schema initialization.
This layer is the lowest in the architecture and has no dependencies on other layers
besides config and utils.
"""
