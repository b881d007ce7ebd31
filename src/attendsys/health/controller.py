from __future__ import annotations

import time

from flask import Flask, jsonify

from ..common.datetime_utils import isoformat, now_utc
from ..container import Container


def register(app: Flask, container: Container) -> None:
    started = time.monotonic()

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify(
            {
                "status": "ok",
                "service": "attendsys",
                "timestamp": isoformat(now_utc()),
                "uptime": f"{int(time.monotonic() - started)}s",
            }
        )
