# Models package init
"""
DogPatch Backend - ORM Models
==============================

Importing this package registers every table on ``Base.metadata``.
Order of the FK graph: users ← dogs, reviews, tokens.
"""

from dogpatch.models.dog import Dog, Gender
from dogpatch.models.review import Review
from dogpatch.models.token import Token
from dogpatch.models.user import User

__all__ = ["Dog", "Gender", "Review", "Token", "User"]
