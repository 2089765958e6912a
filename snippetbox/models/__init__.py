"""
Snippetbox — ORM Models
=========================

What:  SQLAlchemy models for every table the application owns.
How:   Importing this package registers all tables on Base.metadata, which
       Alembic autogenerate and the test schema fixture rely on.
"""

from snippetbox.models.user import User
from snippetbox.models.snippet import Snippet
from snippetbox.models.session import SessionRecord

__all__ = ["User", "Snippet", "SessionRecord"]
