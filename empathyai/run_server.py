import argparse
import os

import uvicorn

from empathyai.config import Config
from empathyai.logging_utils import setup_logging


def main() -> int:
    parser = argparse.ArgumentParser(prog="empathyai-server")
    parser.add_argument("--host", default=Config.HOST, help="Bind address.")
    parser.add_argument("--port", type=int, default=Config.PORT, help="Bind port.")
    parser.add_argument(
        "--provider",
        choices=["gemini", "ollama", "stub"],
        help="Override ASSISTANT_PROVIDER.",
    )
    args = parser.parse_args()

    if args.provider:
        os.environ["ASSISTANT_PROVIDER"] = args.provider
        Config.ASSISTANT_PROVIDER = args.provider

    setup_logging(Config.LOG_DIR, Config.LOG_LEVEL)
    uvicorn.run("empathyai.main:app", host=args.host, port=args.port, log_level=Config.LOG_LEVEL.lower())
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
