"""Infrastructure: settings, logging, activity log."""
