# Import models so Alembic and Base metadata are aware of them
from .content import Book, Video, Question, Flashcard  # noqa: F401
