"""Result rendering for the CLI: Rich for humans, JSON for machines."""
