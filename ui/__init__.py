"""Web surfaces for vibe-architect."""
