"""Analysis orchestration, sessions, summary / CSV output and progress display."""
