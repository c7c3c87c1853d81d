"""Skills Tracker: project/task tracking backend with skill-based assignment."""
