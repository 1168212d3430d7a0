"""Interactive terminal client for the csvchat API."""
