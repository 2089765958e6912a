"""
Snippetbox — Application Package
==================================

A server-rendered web application for sharing text snippets: users sign up,
log in, create snippets with an expiry and change their password.

Architecture:

    ┌─────────────────────────────────────┐
    │   Routes (HTTP handlers, templates) │  ← forms, redirects, pages
    ├─────────────────────────────────────┤
    │   Services (data access, sessions)  │  ← queries, hashing, session store
    ├─────────────────────────────────────┤
    │   Models & Schemas                  │  ← SQLAlchemy ORM + pydantic forms
    ├─────────────────────────────────────┤
    │   Database (persistence)            │  ← async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
