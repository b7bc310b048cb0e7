"""Utilities: seeded RNG, preset configurations and highscore snapshots."""
