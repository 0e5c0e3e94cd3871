from __future__ import annotations

from typing import Any, Dict

APP_INFO: Dict[str, Any] = {
    "name": "Health Check Demo",
    "version": "1.0.0",
    "description": "Flip an in-memory liveness flag and watch the platform react to the health probe.",
    "history": [
        {
            "version": "1.0.0",
            "items": [
                "GET / reports the application status with a link to /getdown",
                "GET /getdown sets the application status to DOWN",
                "GET /kill terminates the process",
                "Management endpoints: /actuator, /actuator/health, /actuator/info",
            ],
        },
    ],
}
