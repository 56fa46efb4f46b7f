"""HTTP API for playing runs of the puzzle game."""
