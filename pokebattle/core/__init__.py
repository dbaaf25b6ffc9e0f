"""Battle rules, state and the per-turn orchestration pieces."""
