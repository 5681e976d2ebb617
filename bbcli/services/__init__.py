"""Command logic: repository and pull request resolution, operations."""
