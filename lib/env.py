from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv


def load_env(root: Path | None = None) -> bool:
    """
    Load .env into the process environment.
    Returns False when no .env file is found.
    """
    base = root or Path(".")

    # Prefer repo-root .env
    env_path = base / ".env"
    if env_path.is_file():
        load_dotenv(dotenv_path=env_path)
        return True

    # Fallback: common pattern ".env/.env"
    alt = base / ".env" / ".env"
    if alt.is_file():
        load_dotenv(dotenv_path=alt)
        return True

    return False
