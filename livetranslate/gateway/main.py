from __future__ import annotations

import argparse
from dataclasses import replace

from dotenv import load_dotenv


def _parse_args(argv: list[str] | None, host: str, port: int) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="livetranslate-gateway")
    p.add_argument("--host", default=host, help="bind address")
    p.add_argument("--port", type=int, default=port, help="bind port")
    p.add_argument(
        "--log-console",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="mirror JSON log lines to stderr",
    )
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    import uvicorn

    from livetranslate.app.logging_setup import setup_app_logger
    from livetranslate.gateway.server import create_app
    from livetranslate.gateway.settings import GatewaySettings

    settings = GatewaySettings.from_env()
    args = _parse_args(argv, settings.host, settings.port)
    settings = replace(settings, host=args.host, port=args.port)

    logger, _log_dir, log_path = setup_app_logger(
        "livetranslate.gateway",
        filename="gateway.log",
        console=bool(args.log_console),
    )
    if not settings.provider_url:
        logger.warning("provider_url_missing", extra={"env": "TRANSLATE_PROVIDER_URL"})

    print(f"Logs: {log_path}")
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_level="info")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
