"""
main.py: unified launcher for the Weather Query Agent.

Usage:
    python main.py

Starts the weather backend and the Streamlit frontend as subprocesses, waits
for both to be healthy, then prints the URL. Press Ctrl-C to exit; both
servers are terminated cleanly on exit.
"""

import os
import sys
import subprocess
import time
from pathlib import Path

import httpx
from dotenv import load_dotenv

# ── Configuration ─────────────────────────────────────────────────────────────

ROOT = Path(__file__).parent
load_dotenv(dotenv_path=ROOT / ".env")

BACKEND_PORT = int(os.getenv("BACKEND_PORT", "8001"))
FRONTEND_PORT = int(os.getenv("FRONTEND_PORT", "8501"))

BACKEND_HEALTH_URL = f"http://localhost:{BACKEND_PORT}/health"
FRONTEND_HEALTH_URL = f"http://localhost:{FRONTEND_PORT}/_stcore/health"


# ── Health polling ─────────────────────────────────────────────────────────────

def _wait_for_health(url: str, timeout: int) -> bool:
    """Poll GET url until status 200 or timeout (seconds). Returns True on success."""
    deadline = time.time() + timeout
    while time.time() < deadline:
        try:
            if httpx.get(url, timeout=1.0).status_code == 200:
                return True
        except httpx.HTTPError:
            pass
        time.sleep(0.5)
    return False


# ── Graceful shutdown ──────────────────────────────────────────────────────────

def _shutdown(procs: list, log_files: list) -> None:
    """SIGTERM all processes, wait up to 5 s each, then SIGKILL stragglers."""
    for p in procs:
        p.terminate()
    for p in procs:
        try:
            p.wait(timeout=5)
        except subprocess.TimeoutExpired:
            p.kill()
    for f in log_files:
        f.close()


def _start(label: str, command: list, cwd: Path, log_path: Path, health_url: str,
           timeout: int, procs: list, log_files: list) -> None:
    print(f"Starting {label}...", end=" ", flush=True)
    log_file = open(log_path, "w")
    log_files.append(log_file)
    procs.append(
        subprocess.Popen(command, cwd=cwd, stdout=log_file, stderr=subprocess.STDOUT)
    )

    if not _wait_for_health(health_url, timeout=timeout):
        print("FAILED")
        print(
            f"Error: {label} did not become healthy within {timeout} s.\n"
            f"Check {log_path.name} for details.",
            file=sys.stderr,
        )
        _shutdown(procs, log_files)
        sys.exit(1)
    print("OK")


# ── Entry point ────────────────────────────────────────────────────────────────

def main() -> None:
    log_files = []
    procs = []

    try:
        print(
            "╔══════════════════════════════════════╗\n"
            "║   Weather Query Agent                ║\n"
            f"║   Backend  → http://localhost:{BACKEND_PORT}   ║\n"
            f"║   Frontend → http://localhost:{FRONTEND_PORT}   ║\n"
            "║   Logs  → weather_backend.log        ║\n"
            "║           frontend.log               ║\n"
            "╚══════════════════════════════════════╝"
        )

        _start(
            "weather backend",
            [sys.executable, "agent_server.py"],
            cwd=ROOT / "weather-backend",
            log_path=ROOT / "weather_backend.log",
            health_url=BACKEND_HEALTH_URL,
            timeout=15,
            procs=procs,
            log_files=log_files,
        )
        _start(
            "Streamlit frontend",
            [sys.executable, "-m", "streamlit", "run", "frontend/app.py",
             "--server.port", str(FRONTEND_PORT),
             "--server.headless", "true"],
            cwd=ROOT,
            log_path=ROOT / "frontend.log",
            health_url=FRONTEND_HEALTH_URL,
            timeout=30,
            procs=procs,
            log_files=log_files,
        )

        print(f"\nOpen your browser at: http://localhost:{FRONTEND_PORT}")
        print("Press Ctrl-C to stop all services.\n")

        # Keep the launcher alive until interrupted
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            print()

    finally:
        print("Shutting down...")
        _shutdown(procs, log_files)


if __name__ == "__main__":
    main()
