"""Word Count Tracker: records document word counts over time."""
