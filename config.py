"""
Centralized configuration for the Grit settlement core.
"""

from __future__ import annotations

import os

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _parse_int_list(env_var: str, default: list[int]) -> list[int]:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return [int(x.strip()) for x in raw.split(",") if x.strip()]
    except ValueError:
        return default


# Ledger
STARTING_GRIT = _parse_int("STARTING_GRIT", 500)

# Ambush bets (Subject-Takes-All)
AMBUSH_GHOSTING_THRESHOLD = _parse_float("AMBUSH_GHOSTING_THRESHOLD", 70.0)  # % drop, strictly greater
AMBUSH_COMMISH_CUT = _parse_float("AMBUSH_COMMISH_CUT", 0.05)  # House cut when the subject wins
AMBUSH_GHOSTING_REFUND_RATE = _parse_float("AMBUSH_GHOSTING_REFUND_RATE", 0.5)  # Share of pot returned to bettors

# Squad Ride (co-op parlays)
SQUAD_RIDE_MIN_ODDS = _parse_int("SQUAD_RIDE_MIN_ODDS", 150)
SQUAD_RIDE_MAX_ODDS = _parse_int("SQUAD_RIDE_MAX_ODDS", 1000)
SQUAD_RIDE_RIDER_BONUS = _parse_float("SQUAD_RIDE_RIDER_BONUS", 0.10)  # +10% per rider already aboard
SQUAD_RIDE_MIN_LEGS = _parse_int("SQUAD_RIDE_MIN_LEGS", 2)

# Tribunal (superlatives)
TRIBUNAL_BASE_ODDS = _parse_int_list("TRIBUNAL_BASE_ODDS", [150, 200, 250, 300])
TRIBUNAL_DEFAULT_ODDS = _parse_int("TRIBUNAL_DEFAULT_ODDS", 400)  # Nominees past the base list

# Odds band for AI-suggested prop lines
PROP_MIN_ODDS = _parse_int("PROP_MIN_ODDS", -500)
PROP_MAX_ODDS = _parse_int("PROP_MAX_ODDS", 1000)

# Gulag (bankruptcy lockout and redemption)
GULAG_BAN_SECONDS = _parse_int("GULAG_BAN_SECONDS", 604800)  # 7 days
GULAG_REDEMPTION_STAKE = _parse_int("GULAG_REDEMPTION_STAKE", 50)
GULAG_REDEMPTION_REWARD = _parse_int("GULAG_REDEMPTION_REWARD", 100)
GULAG_REDEMPTION_MIN_ODDS = _parse_int("GULAG_REDEMPTION_MIN_ODDS", 300)
GULAG_REDEMPTION_MAX_ODDS = _parse_int("GULAG_REDEMPTION_MAX_ODDS", 1000)
GULAG_RELEASE_BALANCE = _parse_int("GULAG_RELEASE_BALANCE", 50)  # Balance after a ban expires
GULAG_BAILOUT_MIN = _parse_int("GULAG_BAILOUT_MIN", 2000)
GULAG_BAILOUT_PRISONER_SHARE = _parse_float("GULAG_BAILOUT_PRISONER_SHARE", 0.5)

# Trading floor (clamped to 0.0 - 0.5 to prevent economy-breaking values)
_raw_trading_tax_rate = _parse_float("TRADING_TAX_RATE", 0.05)
TRADING_TAX_RATE = max(0.0, min(0.5, _raw_trading_tax_rate))
TRADING_MIN_PRICE = _parse_int("TRADING_MIN_PRICE", 10)
TRADING_MAX_PRICE = _parse_int("TRADING_MAX_PRICE", 10000)
TRADING_LISTING_SECONDS = _parse_int("TRADING_LISTING_SECONDS", 604800)  # 7 days

# Inventory
EQUIP_CAPACITY = _parse_int("EQUIP_CAPACITY", 3)

# AI/LLM Configuration (via LiteLLM)
AI_API_KEY = os.getenv("AI_API_KEY")
AI_MODEL = os.getenv("AI_MODEL", "gemini/gemini-2.5-flash")
AI_TIMEOUT_SECONDS = _parse_float("AI_TIMEOUT_SECONDS", 15.0)
AI_MAX_TOKENS = _parse_int("AI_MAX_TOKENS", 800)
AI_FEATURES_ENABLED = _parse_bool("AI_FEATURES_ENABLED", False)
AI_TRANSCRIPT_LIMIT = _parse_int("AI_TRANSCRIPT_LIMIT", 300)  # Messages included per prompt
