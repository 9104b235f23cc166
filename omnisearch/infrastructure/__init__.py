"""Infrastructure: Postgres implementations of the application interfaces."""
