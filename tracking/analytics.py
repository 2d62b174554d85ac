"""Display helpers for unlock time and daily usage."""

from typing import Any, Dict

from tracking.daily_usage import DailyUsage


def format_duration(seconds: float) -> str:
    """Format seconds as "1 hr 2 mins", "1 min 30 secs" or "45 secs" (seconds dropped past an hour)."""
    hours, rest = divmod(max(0, int(seconds)), 3600)
    mins, secs = divmod(rest, 60)

    parts = []
    if hours:
        parts.append(f"{hours} {'hr' if hours == 1 else 'hrs'}")
    if mins:
        parts.append(f"{mins} {'min' if mins == 1 else 'mins'}")
    if secs and not hours:
        parts.append(f"{secs} {'sec' if secs == 1 else 'secs'}")
    return " ".join(parts) or "0 sec"


def summarise_usage(usage: DailyUsage) -> Dict[str, Any]:
    """
    Build a display summary of one day's usage.

    Args:
        usage: The day's usage record.

    Returns:
        Dict with raw seconds, minute roundings and formatted strings.
    """
    cap = usage.daily_cap_seconds
    return {
        "date": usage.date,
        "plan_tier": usage.plan_tier,
        "earned_seconds": usage.earned_seconds,
        "consumed_seconds": usage.consumed_seconds,
        "remaining_seconds": usage.remaining_seconds,
        "daily_cap_seconds": cap,
        "has_reached_cap": usage.has_reached_daily_cap,
        "progress": usage.daily_cap_progress,
        "earned_minutes": round(usage.earned_seconds / 60),
        "consumed_minutes": round(usage.consumed_seconds / 60),
        "remaining_minutes": round(usage.remaining_seconds / 60),
        "earned_text": format_duration(usage.earned_seconds),
        "consumed_text": format_duration(usage.consumed_seconds),
        "cap_text": format_duration(cap) if cap is not None else "Unlimited",
    }
