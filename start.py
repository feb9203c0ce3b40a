"""
Convenience launcher — runs the FlowState API and, optionally, the input agent
against it.

Usage:
    python start.py                         # API only
    python start.py --agent                 # API + input agent (needs the `agent` extra)
    python start.py --agent --interval 2    # report input counts every 2 s
"""

from __future__ import annotations

import argparse
import importlib.util
import subprocess
import sys
import time
import urllib.error
import urllib.request

from flowstate.config import config


def start_engine() -> subprocess.Popen:
    return subprocess.Popen(
        [sys.executable, "-m", "flowstate.main"],
        stdout=sys.stdout,
        stderr=sys.stderr,
    )


def wait_until_healthy(url: str, timeout_s: float = 10.0) -> bool:
    """Poll /health until the API answers or *timeout_s* passes."""
    deadline = time.monotonic() + timeout_s
    while time.monotonic() < deadline:
        try:
            with urllib.request.urlopen(f"{url}/health", timeout=1):
                return True
        except (urllib.error.URLError, OSError):
            time.sleep(0.25)
    return False


def start_input_agent(url: str, interval_s: float):
    """Run the input agent in-process on a daemon thread, or None without pynput."""
    if importlib.util.find_spec("pynput") is None:
        print("[!] pynput is not installed; run `pip install flowstate[agent]` for the input agent")
        return None
    from flowstate.telemetry.input_agent import InputAgent
    agent = InputAgent(engine_url=url, poll_interval_s=interval_s)
    agent.start()
    return agent


def main() -> None:
    parser = argparse.ArgumentParser(description="Start the FlowState API")
    parser.add_argument("--agent", action="store_true", help="Also start the input agent")
    parser.add_argument("--interval", type=float, default=config.tick_interval_s,
                        help="Input agent report interval (seconds)")
    args = parser.parse_args()

    url = f"http://{config.api_host}:{config.api_port}"
    print("Starting FlowState…")
    engine_proc = start_engine()

    agent = None
    if args.agent:
        if wait_until_healthy(url):
            agent = start_input_agent(url, args.interval)
            if agent is not None:
                print(f"Input agent reporting every {args.interval}s.")
        else:
            print(f"[!] {url} did not come up; input agent not started")

    print(f"\nAPI      → {url}")
    print(f"API docs → {url}/docs")
    print("Press Ctrl+C to stop.\n")

    try:
        engine_proc.wait()
    except KeyboardInterrupt:
        print("\nShutting down…")
        if agent is not None:
            agent.stop()
        engine_proc.terminate()
        engine_proc.wait()


if __name__ == "__main__":
    main()
