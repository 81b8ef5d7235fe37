"""Validation utilities for repository names and label fields."""

import re


def validate_owner_repo(owner_repo: str) -> str:
    """
    Validate repository name format (owner/repo).

    Args:
        owner_repo: Repository name in owner/repo format

    Returns:
        Validated repository name

    Raises:
        ValueError: If repository name format is invalid
    """
    if not owner_repo:
        raise ValueError("Repository name cannot be empty")

    # Must be in format "owner/repo"
    if not re.match(r'^[a-zA-Z0-9_-]+/[a-zA-Z0-9_.-]+$', owner_repo):
        raise ValueError(
            f"Invalid repository format: {owner_repo}. Must be 'owner/repo'"
        )

    # Prevent path traversal
    if '..' in owner_repo:
        raise ValueError(f"Invalid repository name: {owner_repo}")

    return owner_repo


def validate_label_color(color: str) -> str:
    """
    Validate and normalise a label colour.

    Accepts an optional leading '#', returns six lowercase hex digits.

    Raises:
        ValueError: If the colour is not a 6-digit hex value
    """
    normalized = color.lstrip('#').lower()
    if not re.fullmatch(r'[0-9a-f]{6}', normalized):
        raise ValueError(f"Invalid label color: {color!r}. Must be 6 hex digits")
    return normalized
