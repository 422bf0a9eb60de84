"""Check10 move engine: rules, search and the game wrapper."""
