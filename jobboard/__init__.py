"""jobboard: browse, post and apply to jobs backed by Appwrite TablesDB."""

__version__ = "0.1.0"
