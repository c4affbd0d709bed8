# Static Indian city tables used for coordinates and location fallbacks

# Major Indian cities with approximate city-centre coordinates
CITY_COORDINATES = {
    'Delhi': (28.7041, 77.1025),
    'Mumbai': (19.0760, 72.8777),
    'Bangalore': (12.9716, 77.5946),
    'Bengaluru': (12.9716, 77.5946),
    'Chennai': (13.0827, 80.2707),
    'Kolkata': (22.5726, 88.3639),
    'Hyderabad': (17.3850, 78.4867),
    'Pune': (18.5204, 73.8567),
    'Ahmedabad': (23.0225, 72.5714),
    'Jaipur': (26.9124, 75.7873),
    'Lucknow': (26.8467, 80.9462),
    'Kanpur': (26.4499, 80.3319),
    'Nagpur': (21.1458, 79.0882),
    'Indore': (22.7196, 75.8577),
    'Thane': (19.2183, 72.9781),
    'Bhopal': (23.2599, 77.4126),
}

# Old or colloquial names people still type
CITY_ALIASES = {
    "dehli": "Delhi",
    "dilli": "Delhi",
    "bombay": "Mumbai",
    "calcutta": "Kolkata",
    "madras": "Chennai",
    "poona": "Pune",
    "amdavad": "Ahmedabad",
}

# Geographic centre of India, used when a location is unknown
INDIA_CENTROID = (20.5937, 78.9629)

DEFAULT_CITY_NAMES = [
    'Delhi', 'Mumbai', 'Bangalore', 'Chennai', 'Kolkata',
    'Hyderabad', 'Pune', 'Ahmedabad', 'Jaipur', 'Lucknow',
    'Kanpur', 'Nagpur', 'Indore', 'Thane', 'Bhopal',
]


def match_city(location):
    """Return the table city contained in a free-text location, or None"""
    location_lower = (location or "").lower()
    if not location_lower:
        return None

    # 1. Substring check (e.g. "Koramangala, Bangalore" -> "Bangalore")
    for city in CITY_COORDINATES:
        if city.lower() in location_lower:
            return city

    # 2. Alias check
    for alias, city in CITY_ALIASES.items():
        if alias in location_lower:
            return city

    return None
