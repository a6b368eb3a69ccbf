# Services package init
"""
Blog API — Services Layer
===========================

What:  Business logic between routes (HTTP) and the database (persistence).

Service Inventory:
    - validation:    pure payload checks and shaping, no I/O
    - BlogService:   storage operations with timeouts and error translation
"""
