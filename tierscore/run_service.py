#!/usr/bin/env python3
"""
Service startup wrapper for tierscore.
"""
import os
import sys


def main() -> int:
    host = os.getenv("TIERSCORE_HOST", "0.0.0.0")
    port = int(os.getenv("TIERSCORE_PORT", "8000"))
    print(f"[tierscore] Server: http://{host}:{port}")
    print("[tierscore] Press CTRL+C to stop")
    try:
        import uvicorn
        uvicorn.run(
            "tierscore.main:app",
            host=host,
            port=port,
            reload=False,
            log_level="info",
            access_log=True,
        )
    except KeyboardInterrupt:
        print("\n[tierscore] Shutting down...")
    return 0


if __name__ == "__main__":
    sys.exit(main())
