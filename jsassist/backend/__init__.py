"""Backend package - renders types and proposals for the editor."""
