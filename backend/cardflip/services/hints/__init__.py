"""Server-side hint generation backing the /api/hint endpoint."""
