"""Address enrichment via geocoding and routing."""

from surveydisco.enrichment.maps import MapsClient, TravelInfo, format_distance, format_duration

__all__ = ["MapsClient", "TravelInfo", "format_distance", "format_duration"]
