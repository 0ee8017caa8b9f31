from __future__ import annotations

import argparse

import uvicorn

from cepweather.config import get_settings
from cepweather.observability.logging import configure_logging

DEFAULT_PORTS = {"zipcode": 8080, "temperature": 8181}


def main() -> None:
    parser = argparse.ArgumentParser(description="CEP to temperature services")
    parser.add_argument("service", choices=sorted(DEFAULT_PORTS), help="Which service to run")
    parser.add_argument("--host", default="0.0.0.0", help="Interface to bind")
    parser.add_argument("--port", type=int, default=None, help="Port to bind (default depends on service)")
    parser.add_argument("--log-level", default=None, help="Overrides LOG_LEVEL")
    args = parser.parse_args()

    settings = get_settings()
    configure_logging(args.log_level or settings.log_level)

    uvicorn.run(
        f"cepweather.main:{args.service}_app",
        host=args.host,
        port=args.port or DEFAULT_PORTS[args.service],
        log_config=None,
    )


if __name__ == "__main__":
    main()
