"""Pytest configuration and shared fixtures."""

from hypothesis import settings

# Create a profile named "no_deadline" with deadline disabled.
#
# Pure-Python point arithmetic makes the first examples slow.
settings.register_profile("no_deadline", deadline=None)
settings.load_profile("no_deadline")
