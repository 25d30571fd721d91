"""ORM schema."""
