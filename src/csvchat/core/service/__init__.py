"""The chat pipeline and its building blocks."""
