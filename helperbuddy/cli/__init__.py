"""Management CLI for HelperBuddy."""
