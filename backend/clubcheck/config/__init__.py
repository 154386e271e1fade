"""Configuration loaders backed by files under config/."""
