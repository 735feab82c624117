# Models package init
# Both models are imported here so Base.metadata knows every table
from marknote.models.note import Note
from marknote.models.user import User

__all__ = ["Note", "User"]
