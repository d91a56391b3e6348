"""HTTP API for AskTabs."""
