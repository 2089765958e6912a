"""
Snippetbox — Services Layer
=============================

What:  Data access and business rules, independent of HTTP.

Service Inventory:
    - SnippetService: insert / get / latest, honouring snippet expiry
    - UserService: signup, credential checks, password changes (argon2)
    - session_store: server-side session data (database or memory backed)
"""
