"""
repositories/ - Data Access Layer
==================================
Each repository encapsulates all SQL queries for a specific domain entity.
Repositories receive raw data from the database and return domain model objects.

A repository built with a connection joins the caller's transaction
(see repositories/store.py); one built without borrows its own.
"""
