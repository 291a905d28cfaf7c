from datetime import datetime

from seatwatch.pipeline.io import trim_log_by_time


class RunLog:
    """
    Log to both console and a log buffer, appending each entry to the log file.
    Entries look like `[2026-02-01 12:00:00] [INFO] message`.
    """

    def __init__(self, log_path=None, retention_days=14):
        self.log_path = log_path
        self.lines = []
        if log_path is not None:
            existing = trim_log_by_time(log_path, retention_days=retention_days)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(log_path, "w") as f:
                f.writelines(existing + ["\n--- New Run ---\n"])

    def __call__(self, message, level="INFO"):
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        entry = f"[{timestamp}] [{level}] {message}"
        print(message)
        self.lines.append(entry)
        if self.log_path is not None:
            with open(self.log_path, "a") as f:
                f.write(entry + "\n")
