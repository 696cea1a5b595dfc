"""Pygame front-end: renderer, input normalisation and the human play loop."""
