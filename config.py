import os
from dataclasses import dataclass, field

DEFAULT_ORIGINS = ("http://localhost:5173", "https://cannapliant.vercel.app")
ANTHROPIC_API_URL = "https://api.anthropic.com/v1/messages"


def _int_env(env, name, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _float_env(env, name, default):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def parse_origins(raw, frontend_url=None):
    """Split a comma-separated origin list, dropping blanks and duplicates."""
    if raw is None:
        origins = list(DEFAULT_ORIGINS)
    else:
        origins = [o.strip() for o in raw.split(",") if o.strip()]
    if frontend_url and frontend_url.strip():
        origins.append(frontend_url.strip())
    seen = []
    for origin in origins:
        if origin not in seen:
            seen.append(origin)
    return tuple(seen)


@dataclass(frozen=True)
class Settings:
    api_key: str = field(default="", repr=False)
    allowed_origins: tuple = DEFAULT_ORIGINS
    port: int = 3001
    upstream_url: str = ANTHROPIC_API_URL
    anthropic_version: str = "2023-06-01"
    connect_timeout: float = 10.0
    read_timeout: float = 300.0
    rate_limit: str = "30 per minute"
    max_body_mb: int = 25
    analyze_model: str = "claude-sonnet-4-20250514"
    analyze_max_tokens: int = 2000

    @property
    def has_credential(self):
        return bool(self.api_key)

    @property
    def timeout(self):
        return (self.connect_timeout, self.read_timeout)

    @classmethod
    def from_env(cls, env=None):
        """Read the process configuration. Called once at startup."""
        env = os.environ if env is None else env
        return cls(
            api_key=(env.get("ANTHROPIC_API_KEY") or "").strip(),
            allowed_origins=parse_origins(env.get("ALLOWED_ORIGINS"), env.get("FRONTEND_URL")),
            port=_int_env(env, "PORT", 3001),
            upstream_url=env.get("UPSTREAM_URL") or ANTHROPIC_API_URL,
            anthropic_version=env.get("ANTHROPIC_VERSION") or "2023-06-01",
            connect_timeout=_float_env(env, "UPSTREAM_CONNECT_TIMEOUT", 10.0),
            read_timeout=_float_env(env, "UPSTREAM_READ_TIMEOUT", 300.0),
            rate_limit=env.get("RATE_LIMIT") or "30 per minute",
            max_body_mb=_int_env(env, "MAX_BODY_MB", 25),
            analyze_model=env.get("ANALYZE_MODEL") or "claude-sonnet-4-20250514",
            analyze_max_tokens=_int_env(env, "ANALYZE_MAX_TOKENS", 2000),
        )
