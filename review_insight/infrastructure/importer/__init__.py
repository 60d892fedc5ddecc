from .place_list_parser import PlaceListParser, parse_place_list

__all__ = ["PlaceListParser", "parse_place_list"]
