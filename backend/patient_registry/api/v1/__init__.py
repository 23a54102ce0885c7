"""Version 1 of the registry API."""
