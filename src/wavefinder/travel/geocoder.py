"""
Offline geocoder.

Maps a free-text origin ("London", "new york, usa") to approximate coordinates
using a fixed city table. There are no network calls: an unknown location
returns None and callers fall back to `estimate_simple_travel`.
"""

from __future__ import annotations

from wavefinder.domain.models import Coordinates

# Insertion order matters: the first substring match wins.
CITY_COORDINATES: dict[str, Coordinates] = {
    "london": Coordinates(lat=51.5074, lng=-0.1278),
    "new york": Coordinates(lat=40.7128, lng=-74.0060),
    "los angeles": Coordinates(lat=34.0522, lng=-118.2437),
    "paris": Coordinates(lat=48.8566, lng=2.3522),
    "tokyo": Coordinates(lat=35.6762, lng=139.6503),
    "sydney": Coordinates(lat=-33.8688, lng=151.2093),
    "san francisco": Coordinates(lat=37.7749, lng=-122.4194),
    "amsterdam": Coordinates(lat=52.3676, lng=4.9041),
    "barcelona": Coordinates(lat=41.3851, lng=2.1734),
    "lisbon": Coordinates(lat=38.7223, lng=-9.1393),
    "dublin": Coordinates(lat=53.3498, lng=-6.2603),
    "berlin": Coordinates(lat=52.5200, lng=13.4050),
    "madrid": Coordinates(lat=40.4168, lng=-3.7038),
    "rome": Coordinates(lat=41.9028, lng=12.4964),
    "copenhagen": Coordinates(lat=55.6761, lng=12.5683),
    "stockholm": Coordinates(lat=59.3293, lng=18.0686),
    "toronto": Coordinates(lat=43.6532, lng=-79.3832),
    "vancouver": Coordinates(lat=49.2827, lng=-123.1207),
    "miami": Coordinates(lat=25.7617, lng=-80.1918),
    "honolulu": Coordinates(lat=21.3099, lng=-157.8581),
    "rio de janeiro": Coordinates(lat=-22.9068, lng=-43.1729),
    "buenos aires": Coordinates(lat=-34.6037, lng=-58.3816),
    "cape town": Coordinates(lat=-33.9249, lng=18.4241),
    "mumbai": Coordinates(lat=19.0760, lng=72.8777),
    "singapore": Coordinates(lat=1.3521, lng=103.8198),
    "bangkok": Coordinates(lat=13.7563, lng=100.5018),
    "bali": Coordinates(lat=-8.3405, lng=115.0920),
    "mexico city": Coordinates(lat=19.4326, lng=-99.1332),
    "lima": Coordinates(lat=-12.0464, lng=-77.0428),
}


def geocode(location: str) -> Coordinates | None:
    """Resolve `location` to coordinates: exact match first, then substring either way."""
    normalized = (location or "").strip().lower()
    if not normalized:
        return None

    exact = CITY_COORDINATES.get(normalized)
    if exact is not None:
        return exact

    for city, coords in CITY_COORDINATES.items():
        if normalized in city or city in normalized:
            return coords
    return None
