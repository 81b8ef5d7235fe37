"""External collaborators (issue tracker)."""
