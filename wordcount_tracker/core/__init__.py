"""Core modules: word counting, snapshots, scanning, update hooks and reports."""
