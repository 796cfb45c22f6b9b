"""Raga media lookup and the time-of-day listening pick."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

RAGA_MEDIA: dict[str, str] = {
    "bhatiyar": "fveOYRT4DDw",
    "ahir-bhairav": "9GlMrtTfSD0",
    "darbari-kanada": "AROV6CQ2W9Y",
    "shuddha-sarang": "4Y4UZagZNm0",
    "bhimpalasi": "uEqYzdz3Zvg",
    "tilak-kamod": "UNx_fYV81fM",
    "durga": "gR7yqkEzQxI",
    "shankara": "vtsmtZYtQTs",
    "malkauns": "cmw1C4PGV4s",
    "megh": "eA2_S9Pyds4",
    "miyan-malhar": "RqwE6K8Dy-g",
    "bahar": "-19yZ9vwGys",
    "basant": "L63NkRUwqLA",
    "desh": "3utGH37HzCk",
    "vrindavani-sarang": "TaQKy-gTHtM",
    "shree": "o8UrB5Sfmow",
    "puriya": "2gFpYlSILQs",
}

DEFAULT_RAGA_ID = "bhatiyar"


@dataclass(frozen=True)
class DailySession:
    mood: str
    raga: str
    raga_id: str
    description: str


DAILY_SESSIONS: dict[str, DailySession] = {
    "morning": DailySession(
        mood="Morning Calm",
        raga="Raag Bhatiyar",
        raga_id="bhatiyar",
        description="A gentle, contemplative raga to begin your day with clarity and softness.",
    ),
    "afternoon": DailySession(
        mood="Golden Afternoon",
        raga="Raag Shuddha Sarang",
        raga_id="shuddha-sarang",
        description="Warm and devotional, perfect for a grounded mid-day pause.",
    ),
    "evening": DailySession(
        mood="Evening Glow",
        raga="Raag Tilak Kamod",
        raga_id="tilak-kamod",
        description="Light, graceful and a little playful, ideal for unwinding in the early evening.",
    ),
    "night": DailySession(
        mood="Night Reflection",
        raga="Raag Darbari Kanada",
        raga_id="darbari-kanada",
        description="Deep and serious, with slow phrases that invite introspection.",
    ),
    "monsoon": DailySession(
        mood="Monsoon Mood",
        raga="Raag Megh",
        raga_id="megh",
        description="Majestic and powerful, evoking dark clouds, thunder and heavy skies.",
    ),
    "winter": DailySession(
        mood="Winter Stillness",
        raga="Raag Shree",
        raga_id="shree",
        description="An ancient, solemn raga that feels inward and spiritual.",
    ),
}


def media_ref_for(raga_id: str | None) -> str | None:
    if not raga_id:
        return None
    return RAGA_MEDIA.get(str(raga_id).strip())


def session_key_for_hour(hour: int) -> str:
    if 5 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def daily_session_for(now: datetime | None = None) -> tuple[str, DailySession]:
    moment = now if now is not None else datetime.now()
    key = session_key_for_hour(moment.hour)
    return key, DAILY_SESSIONS[key]


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``m:ss`` for progress labels."""
    try:
        total = max(0, int(float(seconds)))
    except (TypeError, ValueError):
        total = 0
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"
