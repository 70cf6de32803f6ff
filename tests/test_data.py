"""Tests for data.py: locating, reading and caching the boundary files."""
import pytest

from vanmaps import data
from vanmaps.data import (
    AMBULANCE_BOUNDARIES_FILE,
    COUNTY_BOUNDARIES_FILE,
    ambulance_boundary_data,
    county_boundary_data,
)


@pytest.fixture
def data_dir(tmp_path, monkeypatch, county_gdf, service_gdf):
    county_gdf.drop(columns="deaths").to_file(tmp_path / COUNTY_BOUNDARIES_FILE, driver="GeoJSON")
    service_gdf.drop(columns="hoaxes").to_file(tmp_path / AMBULANCE_BOUNDARIES_FILE, driver="GeoJSON")
    monkeypatch.setenv("VANMAPS_DATA_DIR", str(tmp_path))
    data._read_boundaries.cache_clear()
    yield tmp_path
    data._read_boundaries.cache_clear()


class TestBoundaryData:
    def test_county_boundaries(self, data_dir):
        counties = county_boundary_data()
        assert len(counties) == 150
        assert {"CNTY14", "county", "in_london", "geometry"} <= set(counties.columns)
        assert counties["in_london"].dtype == bool
        assert counties["in_london"].sum() == 18

    def test_null_london_flag_read_as_false(self, tmp_path, monkeypatch, county_gdf):
        county_gdf = county_gdf.drop(columns="deaths")
        flags = county_gdf["in_london"].astype(object)
        flags[149] = None
        county_gdf["in_london"] = flags
        (tmp_path / COUNTY_BOUNDARIES_FILE).write_text(county_gdf.to_json())
        monkeypatch.setenv("VANMAPS_DATA_DIR", str(tmp_path))
        data._read_boundaries.cache_clear()
        counties = county_boundary_data()
        data._read_boundaries.cache_clear()
        assert counties["in_london"].dtype == bool
        assert counties["in_london"].sum() == 18
        assert not counties["in_london"].iloc[149]

    def test_ambulance_boundaries(self, data_dir):
        services = ambulance_boundary_data()
        assert len(services) == 11
        assert "LAS" in set(services["service"])

    def test_file_read_once(self, data_dir):
        county_boundary_data()
        county_boundary_data()
        assert data._read_boundaries.cache_info().misses == 1

    def test_callers_get_copies(self, data_dir):
        first = ambulance_boundary_data()
        first["service"] = "changed"
        assert "changed" not in set(ambulance_boundary_data()["service"])

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VANMAPS_DATA_DIR", str(tmp_path / "empty"))
        data._read_boundaries.cache_clear()
        with pytest.raises(FileNotFoundError, match="VANMAPS_DATA_DIR"):
            ambulance_boundary_data()

    def test_default_location_is_package_data(self, monkeypatch):
        monkeypatch.delenv("VANMAPS_DATA_DIR", raising=False)
        assert data.data_dir().name == "data"
        assert data.data_dir().parent.name == "vanmaps"
