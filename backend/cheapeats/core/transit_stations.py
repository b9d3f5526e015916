"""
Toronto TTC subway stations used for transit-proximity checks.
Major hubs are the interchange stations; ALL_STATIONS covers Lines 1, 2 and 4.
"""
from cheapeats.services.types import LatLng, TransitStation

# Greater Toronto Area bounding box (approximate); TTC features only apply inside it
GTA_MIN_LAT = 43.4
GTA_MAX_LAT = 44.0
GTA_MIN_LNG = -79.8
GTA_MAX_LNG = -79.0

MAJOR_STATIONS = (
    TransitStation("Union", LatLng(43.6453, -79.3806), ("Line 1 Yonge-University",)),
    TransitStation("Bloor-Yonge", LatLng(43.6709, -79.3857), ("Line 1 Yonge-University", "Line 2 Bloor-Danforth")),
    TransitStation("St. George", LatLng(43.6682, -79.3998), ("Line 1 Yonge-University", "Line 2 Bloor-Danforth")),
    TransitStation("Sheppard-Yonge", LatLng(43.7610, -79.4108), ("Line 1 Yonge-University", "Line 4 Sheppard")),
)

# (name, lat, lng, lines). One row per station.
_STATION_ROWS = (
    # Line 1 Yonge (south to north)
    ("Union", 43.6453, -79.3806, ("Line 1",)),
    ("King", 43.6490, -79.3780, ("Line 1",)),
    ("Queen", 43.6523, -79.3791, ("Line 1",)),
    ("Dundas", 43.6561, -79.3802, ("Line 1",)),
    ("College", 43.6614, -79.3831, ("Line 1",)),
    ("Wellesley", 43.6655, -79.3845, ("Line 1",)),
    ("Bloor-Yonge", 43.6709, -79.3857, ("Line 1", "Line 2")),
    ("Rosedale", 43.6772, -79.3889, ("Line 1",)),
    ("Summerhill", 43.6824, -79.3909, ("Line 1",)),
    ("St. Clair", 43.6879, -79.3932, ("Line 1",)),
    ("Davisville", 43.6976, -79.3972, ("Line 1",)),
    ("Eglinton", 43.7058, -79.3987, ("Line 1",)),
    ("Lawrence", 43.7250, -79.4023, ("Line 1",)),
    ("York Mills", 43.7440, -79.4069, ("Line 1",)),
    ("Sheppard-Yonge", 43.7610, -79.4108, ("Line 1", "Line 4")),
    ("North York Centre", 43.7687, -79.4128, ("Line 1",)),
    ("Finch", 43.7807, -79.4149, ("Line 1",)),
    # Line 1 University (south to north)
    ("St. Andrew", 43.6476, -79.3847, ("Line 1",)),
    ("Osgoode", 43.6506, -79.3867, ("Line 1",)),
    ("St. Patrick", 43.6548, -79.3883, ("Line 1",)),
    ("Queen's Park", 43.6600, -79.3907, ("Line 1",)),
    ("Museum", 43.6671, -79.3937, ("Line 1",)),
    ("St. George", 43.6682, -79.3998, ("Line 1", "Line 2")),
    ("Spadina", 43.6673, -79.4038, ("Line 1", "Line 2")),
    ("Dupont", 43.6749, -79.4070, ("Line 1",)),
    ("St. Clair West", 43.6840, -79.4150, ("Line 1",)),
    ("Eglinton West", 43.6995, -79.4358, ("Line 1",)),
    ("Glencairn", 43.7090, -79.4410, ("Line 1",)),
    ("Lawrence West", 43.7157, -79.4443, ("Line 1",)),
    ("Yorkdale", 43.7245, -79.4476, ("Line 1",)),
    ("Wilson", 43.7346, -79.4500, ("Line 1",)),
    ("Sheppard West", 43.7495, -79.4600, ("Line 1",)),
    ("Downsview Park", 43.7535, -79.4780, ("Line 1",)),
    ("Finch West", 43.7655, -79.4910, ("Line 1",)),
    ("York University", 43.7740, -79.4999, ("Line 1",)),
    ("Pioneer Village", 43.7770, -79.5094, ("Line 1",)),
    ("Highway 407", 43.7840, -79.5232, ("Line 1",)),
    ("Vaughan Metropolitan Centre", 43.7942, -79.5273, ("Line 1",)),
    # Line 2 Bloor-Danforth (west to east)
    ("Kipling", 43.6373, -79.5362, ("Line 2",)),
    ("Islington", 43.6453, -79.5246, ("Line 2",)),
    ("Royal York", 43.6485, -79.5113, ("Line 2",)),
    ("Old Mill", 43.6500, -79.4952, ("Line 2",)),
    ("Jane", 43.6500, -79.4849, ("Line 2",)),
    ("Runnymede", 43.6513, -79.4755, ("Line 2",)),
    ("High Park", 43.6542, -79.4670, ("Line 2",)),
    ("Keele", 43.6557, -79.4596, ("Line 2",)),
    ("Dundas West", 43.6569, -79.4528, ("Line 2",)),
    ("Lansdowne", 43.6594, -79.4429, ("Line 2",)),
    ("Dufferin", 43.6601, -79.4355, ("Line 2",)),
    ("Ossington", 43.6624, -79.4265, ("Line 2",)),
    ("Christie", 43.6642, -79.4184, ("Line 2",)),
    ("Bathurst", 43.6660, -79.4110, ("Line 2",)),
    ("Bay", 43.6702, -79.3900, ("Line 2",)),
    ("Sherbourne", 43.6722, -79.3765, ("Line 2",)),
    ("Castle Frank", 43.6738, -79.3687, ("Line 2",)),
    ("Broadview", 43.6769, -79.3587, ("Line 2",)),
    ("Chester", 43.6783, -79.3520, ("Line 2",)),
    ("Pape", 43.6799, -79.3450, ("Line 2",)),
    ("Donlands", 43.6812, -79.3378, ("Line 2",)),
    ("Greenwood", 43.6828, -79.3305, ("Line 2",)),
    ("Coxwell", 43.6843, -79.3232, ("Line 2",)),
    ("Woodbine", 43.6865, -79.3128, ("Line 2",)),
    ("Main Street", 43.6890, -79.3018, ("Line 2",)),
    ("Victoria Park", 43.6953, -79.2930, ("Line 2",)),
    ("Warden", 43.7114, -79.2799, ("Line 2",)),
    ("Kennedy", 43.7325, -79.2636, ("Line 2", "Line 3")),
    # Line 4 Sheppard
    ("Bayview", 43.7669, -79.3868, ("Line 4",)),
    ("Bessarion", 43.7693, -79.3764, ("Line 4",)),
    ("Leslie", 43.7710, -79.3657, ("Line 4",)),
    ("Don Mills", 43.7756, -79.3460, ("Line 4",)),
)

ALL_STATIONS = tuple(TransitStation(name, LatLng(lat, lng), lines) for name, lat, lng, lines in _STATION_ROWS)


def get_station(name: str) -> TransitStation | None:
    """Look up a station by exact name."""
    for station in ALL_STATIONS:
        if station.name == name:
            return station
    return None
