import pandas as pd
import pytest

from review_insight.infrastructure.importer import PlaceListParser, parse_place_list


def test_csv_with_place_and_name_columns(tmp_path):
    path = tmp_path / "places.csv"
    path.write_text(
        "Store Name,Place_ID,City\n"
        "Menya,ChIJ-abc,Tokyo\n"
        ",ChIJ-def,Osaka\n"
        "Repeat,ChIJ-abc,Tokyo\n"
        "Blank,,Kyoto\n"
    )

    places, columns = PlaceListParser().parse(str(path))

    assert columns == {"place_id": "place_id", "name": "store name"}
    assert places == [
        {"place_id": "ChIJ-abc", "name": "Menya"},
        {"place_id": "ChIJ-def", "name": ""},
    ]


def test_excel_file(tmp_path):
    path = tmp_path / "places.xlsx"
    pd.DataFrame({"google_place_id": ["ChIJ-1", "ChIJ-2"]}).to_excel(path, index=False)

    assert [p["place_id"] for p in parse_place_list(str(path))] == ["ChIJ-1", "ChIJ-2"]


def test_missing_place_column(tmp_path):
    path = tmp_path / "places.csv"
    path.write_text("name,city\nMenya,Tokyo\n")

    with pytest.raises(ValueError, match="Place ID"):
        parse_place_list(str(path))


def test_unsupported_extension(tmp_path):
    path = tmp_path / "places.txt"
    path.write_text("place_id\nabc\n")

    with pytest.raises(ValueError, match="Unsupported"):
        parse_place_list(str(path))


def test_missing_file():
    with pytest.raises(FileNotFoundError):
        parse_place_list("does-not-exist.csv")
