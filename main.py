"""Party Kit: dev launcher. Starts the backend in watch mode."""

import argparse
import os
import signal
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
BACKEND_PORT = os.getenv("BACKEND_PORT", "13013")


def main():
    parser = argparse.ArgumentParser(description="Party Kit dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--demo", action="store_true",
                        help="Create a demo game before starting")
    parser.add_argument("--ingest", type=Path, default=None, metavar="DATASET",
                        help="Ingest a raw card dataset into --definition")
    parser.add_argument("--definition", default=None,
                        help="Game definition id that receives the ingested pack")
    args = parser.parse_args()

    data_dir = args.data_dir or Path(os.getenv("DATA_DIR", str(ROOT / "data")))

    if args.demo or args.ingest:
        from party_kit.storage import Storage
        store = Storage(data_dir, presets_dir=ROOT / "presets")
        if args.demo:
            from backend.demo import create_demo_data
            definition = create_demo_data(store)
            args.definition = args.definition or definition.id
        if args.ingest:
            if not args.definition:
                parser.error("--ingest needs --definition (or --demo)")
            from party_kit.ingest import import_pack, ingest, load_dataset
            result = ingest(load_dataset(args.ingest))
            import_pack(store, args.definition, result.pack)
            print(f"Ingested: {result.counts()}")

    # Build env for the subprocess so the backend picks up the same data dir
    env = os.environ.copy()
    env["DATA_DIR"] = str(data_dir.resolve())

    procs: list[subprocess.Popen] = []

    def shutdown(*_):
        print("\nShutting down...")
        for p in procs:
            p.terminate()
        for p in procs:
            p.wait()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    print(f"Starting backend on http://localhost:{BACKEND_PORT} ...")
    procs.append(subprocess.Popen(
        ["uv", "run", "uvicorn", "backend.app:app", "--reload", "--host", HOST, "--port", BACKEND_PORT],
        cwd=ROOT, env=env,
    ))

    for p in procs:
        p.wait()


if __name__ == "__main__":
    main()
