from .places_client import PlaceDataProvider, GooglePlacesClient

__all__ = ["PlaceDataProvider", "GooglePlacesClient"]
