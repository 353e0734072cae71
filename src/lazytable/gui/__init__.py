"""Qt adapters for the table view models."""
