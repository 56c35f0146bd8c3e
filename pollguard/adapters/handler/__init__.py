"""Result handler adapters that consume poll outcomes."""
