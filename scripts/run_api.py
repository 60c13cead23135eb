#!/usr/bin/env python3
"""
シミュレーションAPIサーバーを起動するエントリポイント

    python scripts/run_api.py [--host 0.0.0.0] [--port 8000] [--no-reload]
"""
import argparse
import sys
from pathlib import Path

# プロジェクトルートをPYTHONPATHに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import uvicorn

from infrastructure.config.env_settings_provider import EnvSettingsProvider
from infrastructure.logging.log_setup import setup_console_logging


def main() -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--host", default="0.0.0.0")
    ap.add_argument("--port", type=int, default=8000)
    ap.add_argument("--no-reload", action="store_true", help="disable auto reload")
    args = ap.parse_args()

    settings = EnvSettingsProvider().get()
    setup_console_logging(settings.log_level)

    uvicorn.run(
        "api.main:app",
        host=args.host,
        port=args.port,
        reload=not args.no_reload,  # 開発時の自動リロード
        log_level=settings.log_level.lower(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
