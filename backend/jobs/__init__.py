"""Background jobs served through the job webhook."""
