import os

# Quiet console logging, no log files, no network calls for feedback
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("FEEDBACK_ENABLED", "false")
