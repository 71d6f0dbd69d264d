"""Deterministic avatar URLs."""

import random

import httpx

from community.models.profile import AVATAR_OPTIONS, AvatarSettings

AVATAR_BASE_URL = "https://api.dicebear.com/7.x/personas/svg"

# AvatarSettings field -> image generator query parameter
_OPTIONAL_PARAMS = {
    "hair": "hair",
    "accessories": "accessories",
    "facial_hair": "facialHair",
    "eyebrows": "eyebrows",
}


def build_avatar_url(seed: str, settings: AvatarSettings | None = None) -> str:
    """Image URL for ``seed`` rendered with ``settings``. Same input, same URL."""
    settings = settings or AvatarSettings()
    params = {
        "seed": seed or "default",
        "backgroundColor": settings.background,
        "skinColor": settings.skin,
        "clothing": settings.clothing,
        "gender": settings.gender,
    }
    for field, param in _OPTIONAL_PARAMS.items():
        value = getattr(settings, field)
        if value:
            params[param] = value

    return str(httpx.URL(AVATAR_BASE_URL, params=params))


def random_avatar(rng: random.Random | None = None) -> AvatarSettings:
    """Pick every setting at random from its allowed values."""
    rng = rng or random.Random()
    return AvatarSettings(**{name: rng.choice(values) for name, values in AVATAR_OPTIONS.items()})
