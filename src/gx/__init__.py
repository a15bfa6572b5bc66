"""gx - git extended: tooling for stacked commits and branches."""
