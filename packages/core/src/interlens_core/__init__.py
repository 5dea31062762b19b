"""Interference analysis overlay for pull request diffs."""
