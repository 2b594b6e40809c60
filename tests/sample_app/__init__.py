"""A small application used as the introspection target in tests."""
