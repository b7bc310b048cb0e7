"""Grid-world domain: types, grid model, rewards and learning environments."""
