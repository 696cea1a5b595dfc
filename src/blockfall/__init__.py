"""Blockfall: a falling-block puzzle engine with pygame and gymnasium front-ends."""
