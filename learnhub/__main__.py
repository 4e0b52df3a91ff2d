# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Run the LearnHub API server.

Usage:
    python -m learnhub
"""

import uvicorn

from learnhub.core.config import get_settings


def main() -> None:
    """Serve the application with the configured host, port and workers."""
    settings = get_settings()

    uvicorn.run(
        "learnhub.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=1 if settings.api.reload else settings.api.workers,
        reload=settings.api.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
