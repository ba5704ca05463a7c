"""core — service loading, environment scopes and file helpers shared by plugins."""
