"""Key resolution, paths, pipeline constants, and setup wizard."""

import json
import os
import subprocess
import sys
from pathlib import Path
from urllib.parse import urlparse

# ─────────────────────────────────────────────────────
# Home directory: all local data lives here
# ─────────────────────────────────────────────────────
SKILL_DIR = Path.home() / ".trend-ideas-pipeline"
IDEAS_DIR = SKILL_DIR / "ideas"
RUNS_DIR = SKILL_DIR / "runs"
LOGS_DIR = SKILL_DIR / "logs"
CONFIG_FILE = SKILL_DIR / "config.json"

# ─────────────────────────────────────────────────────
# Pipeline constants
# ─────────────────────────────────────────────────────
MIN_TREND_STRENGTH = 0.1  # strict: trends must score above this
MAX_TRENDS = 20
IDEAS_PER_RUN = 5
CANDIDATE_POOL_SIZE = 5

GENERATION_SPACING = 2.0  # seconds between Claude calls
COMMUNITY_SPACING = 1.0  # seconds between subreddit fetches
SEARCH_SPACING = 2.0  # seconds between Google Trends keywords

SOURCE_TIMEOUT = 15.0  # per external call (one HTTP request)
SCAN_BUDGET = 120.0  # a paced source stops starting new calls after this long
GENERATION_TIMEOUT = 120.0
PERSISTENCE_TIMEOUT = 10

CLAUDE_MODEL = "claude-sonnet-4-6"

_PLACEHOLDERS = {
    "your_supabase_url_here",
    "your_supabase_anon_key_here",
    "your_supabase_service_role_key_here",
}


# ─────────────────────────────────────────────────────
# Utilities
# ─────────────────────────────────────────────────────
def write_secret_file(path: Path, content: str):
    """Write a file with 0600 permissions (owner read/write only)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd = os.open(str(path), os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as f:
        f.write(content)


# ─────────────────────────────────────────────────────
# Key resolution: env → config.json
# ─────────────────────────────────────────────────────
def _get_key(name: str) -> str:
    """Resolve a key: environment variable first, then config.json."""
    val = os.environ.get(name)
    if val:
        return val
    if CONFIG_FILE.exists():
        try:
            cfg = json.loads(CONFIG_FILE.read_text())
            val = cfg.get(name)
            if val:
                return val
        except Exception:
            pass
    return ""


def get_anthropic_key() -> str:
    return _get_key("ANTHROPIC_API_KEY")


def get_supabase_url() -> str:
    return _get_key("SUPABASE_URL")


def get_supabase_key() -> str:
    return _get_key("SUPABASE_SERVICE_ROLE_KEY")


def is_valid_url(url: str) -> bool:
    if not url or url in _PLACEHOLDERS:
        return False
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def is_valid_key(key: str) -> bool:
    return bool(key) and key not in _PLACEHOLDERS and len(key) > 10


def is_supabase_configured() -> bool:
    return is_valid_url(get_supabase_url()) and is_valid_key(get_supabase_key())


# ─────────────────────────────────────────────────────
# Claude backends: API key or Claude Max CLI
# ─────────────────────────────────────────────────────
CLAUDE_CREDENTIALS = Path.home() / ".claude" / ".credentials.json"


def has_claude_cli() -> bool:
    """Check if the `claude` CLI is available."""
    import shutil
    return shutil.which("claude") is not None


def _has_claude_max_credentials() -> bool:
    if not CLAUDE_CREDENTIALS.exists():
        return False
    try:
        creds = json.loads(CLAUDE_CREDENTIALS.read_text())
        return bool(creds.get("claudeAiOauth", {}).get("accessToken"))
    except Exception:
        return False


def call_claude_cli(prompt: str, model: str = CLAUDE_MODEL,
                    timeout: float = GENERATION_TIMEOUT) -> str:
    """Call Claude via the `claude` CLI in non-interactive mode."""
    import shutil
    claude_path = shutil.which("claude")
    if not claude_path:
        raise RuntimeError("claude CLI not found. Install it or set ANTHROPIC_API_KEY.")

    env = {k: v for k, v in os.environ.items() if k != "CLAUDECODE"}

    r = subprocess.run(
        [claude_path, "--print", "--model", model, "--max-turns", "3", "-p", prompt],
        capture_output=True,
        text=True,
        timeout=timeout,
        env=env,
    )
    if r.returncode != 0:
        raise RuntimeError(f"claude CLI failed: {r.stderr[:300]}")
    output = r.stdout.strip()
    if output.endswith("Error: Reached max turns (3)"):
        output = output[: -len("Error: Reached max turns (3)")].strip()
    return output


def get_anthropic_client(timeout: float = GENERATION_TIMEOUT):
    """Create an Anthropic client if an API key is available, else None."""
    import anthropic

    api_key = get_anthropic_key()
    if api_key:
        return anthropic.Anthropic(api_key=api_key, timeout=timeout)
    return None


def get_claude_backend() -> str:
    """Return "api", "cli", or "" when no Claude access is configured."""
    if get_anthropic_key():
        return "api"
    if has_claude_cli() and _has_claude_max_credentials():
        return "cli"
    return ""


# ─────────────────────────────────────────────────────
# config.json
# ─────────────────────────────────────────────────────
def load_config() -> dict:
    """Load the full config.json, including signal_sources and storage."""
    if CONFIG_FILE.exists():
        try:
            return json.loads(CONFIG_FILE.read_text())
        except Exception:
            pass
    return {}


def save_config(config: dict):
    """Save config.json with restricted permissions."""
    SKILL_DIR.mkdir(parents=True, exist_ok=True)
    write_secret_file(CONFIG_FILE, json.dumps(config, indent=2))


# ─────────────────────────────────────────────────────
# Interactive setup
# ─────────────────────────────────────────────────────
def run_setup():
    """Interactive setup: saves keys to config.json."""
    print("\n" + "=" * 60)
    print("  Trend Ideas Pipeline: Setup")
    print("=" * 60)
    print("\nKeys are saved to ~/.trend-ideas-pipeline/config.json\n")

    config = load_config()

    print("1. Anthropic API key (used to generate app ideas from trends)")
    print("   Leave empty to use the `claude` CLI, or mock ideas if neither is set.")
    key = input("   ANTHROPIC_API_KEY: ").strip()
    if key:
        config["ANTHROPIC_API_KEY"] = key

    print("\n2. Supabase project (optional, ideas are kept in memory without it)")
    url = input("   SUPABASE_URL (press Enter to skip): ").strip()
    if url:
        config["SUPABASE_URL"] = url
        key = input("   SUPABASE_SERVICE_ROLE_KEY: ").strip()
        if key:
            config["SUPABASE_SERVICE_ROLE_KEY"] = key
            config.setdefault("storage", "supabase")

    save_config(config)
    print(f"\n  Config saved to {CONFIG_FILE}\n")
    sys.exit(0)
