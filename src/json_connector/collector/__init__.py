"""Local host snapshot collectors."""
