"""Run the notifier with uvicorn: `python -m ghnotify`."""

from __future__ import annotations

import uvicorn

from ghnotify.config import Settings


def main() -> None:
    settings = Settings.from_env()
    uvicorn.run(
        "ghnotify.app:app",
        host="0.0.0.0",
        port=settings.port,
        proxy_headers=True,
        forwarded_allow_ips="*",
    )


if __name__ == "__main__":
    main()
