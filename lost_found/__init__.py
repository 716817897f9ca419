"""Local lost & found board."""
