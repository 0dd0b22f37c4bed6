"""Employee work-profile snapshots: change detection, execution and tenure lifecycle."""
