"""Application launcher for liminal."""

from __future__ import annotations

import logging
import os
import socket


def _port_is_free(host: str, port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as probe:
        try:
            probe.bind((host, port))
        except OSError:
            return False
    return True


def _pick_available_port(host: str, base_port: int, tries: int = 20) -> int:
    """First free port in `base_port .. base_port + tries - 1`, else `base_port`."""
    return next((p for p in range(base_port, base_port + tries) if _port_is_free(host, p)), base_port)


def configure_logging() -> None:
    level = str(os.environ.get("LIMINAL_LOG_LEVEL", "INFO")).strip().upper() or "INFO"
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> int:
    """Launch the web application."""
    configure_logging()
    host = os.environ.get("LIMINAL_HOST", "127.0.0.1")
    port = int(os.environ.get("LIMINAL_PORT", "8000"))
    port = _pick_available_port(host, port)
    logging.getLogger(__name__).info("serving on http://%s:%d", host, port)

    import uvicorn

    uvicorn.run("liminal.web.app:app", host=host, port=port, reload=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
