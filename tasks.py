# tasks.py
# Invoke is the source of truth.
#   invoke api      -> run the FastAPI app with uvicorn
#   invoke test     -> run the pytest suite
#   invoke sources  -> show which transcript backend / upstreams the current env selects

from invoke import task
import os, sys, subprocess
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

PY       = sys.executable
API_HOST = os.environ.get("HOST", "0.0.0.0")
API_PORT = int(os.environ.get("PORT", "3000"))


def _run(cmd, env: dict | None = None, **kwargs):
    """Run shell cmd with repo root on PYTHONPATH, plus optional env overrides."""
    base = os.environ.copy()
    root = str(Path(".").resolve())
    base["PYTHONPATH"] = f'{root}{os.pathsep}{base.get("PYTHONPATH","")}'
    if env:
        base.update(env)
    print(f"$ {cmd}")
    return subprocess.run(cmd, shell=True, check=True, env=base, **kwargs)


@task
def api(c, reload=True):
    """Start the API."""
    reload_flag = "--reload" if str(reload).lower() != "false" else ""
    _run(f'{PY} -m uvicorn app.main:app --host {API_HOST} --port {API_PORT} {reload_flag}')


@task
def test(c, k=None):
    """Run tests (optionally filtered with -k)."""
    expr = f' -k "{k}"' if k else ""
    _run(f"{PY} -m pytest -q{expr}")


@task
def sources(c):
    """Print the backends the current environment would use."""
    from app.routers.health import describe_backends
    from app.settings import get_settings

    for key, value in describe_backends(get_settings()).items():
        print(f"{key:18} {value}")
