from library_api.models.author import Author, Book

__all__ = [
    "Author",
    "Book",
]
