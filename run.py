#!/usr/bin/env python
# run.py

import sys

# --- Force UTF-8 encoding for stdout/stderr so emojis and other Unicode work in logs ---
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8")
    sys.stderr.reconfigure(encoding="utf-8")

from threading import Thread

from storebot.health_server import app as health_app
from storebot.main import start_bot
from storebot.misc import EnvKeys


def run_health_server() -> None:
    health_app.run(host="0.0.0.0", port=EnvKeys.PORT)


if __name__ == '__main__':
    # Start the health check (HTTP) server in a daemon thread
    Thread(target=run_health_server, daemon=True).start()
    # Then start the Telegram bot (blocking)
    start_bot()
