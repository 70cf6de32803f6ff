"""Tests for geography.py: level inference, dataset checks and joining user data."""
import numpy as np
import pandas as pd
import pytest

from vanmaps.geography import GeographyLevel, RegionDataset, attach_data, london_flags


class TestGeographyLevel:
    def test_county_column_means_county_level(self, county_gdf):
        assert GeographyLevel.infer(county_gdf) is GeographyLevel.COUNTY

    def test_anything_else_is_service_level(self, service_gdf):
        assert GeographyLevel.infer(service_gdf) is GeographyLevel.SERVICE_AREA

    def test_level_attributes(self):
        assert GeographyLevel.COUNTY.id_column == "county"
        assert GeographyLevel.COUNTY.file_stem == "counties"
        assert GeographyLevel.SERVICE_AREA.id_column == "service"
        assert GeographyLevel.SERVICE_AREA.file_stem == "services"
        assert GeographyLevel.COUNTY.has_subset
        assert not GeographyLevel.SERVICE_AREA.has_subset


class TestRegionDataset:
    def test_level_decided_at_construction(self, county_gdf):
        dataset = RegionDataset.from_geodataframe(county_gdf)
        assert dataset.level is GeographyLevel.COUNTY
        assert len(dataset.ids) == 150

    def test_explicit_level_wins(self, county_gdf):
        county_gdf["service"] = county_gdf["county"]
        dataset = RegionDataset.from_geodataframe(county_gdf, GeographyLevel.SERVICE_AREA)
        assert dataset.level is GeographyLevel.SERVICE_AREA

    def test_duplicate_identifiers_rejected(self, service_gdf):
        service_gdf.loc[1, "service"] = "EMAS"
        with pytest.raises(ValueError, match="Duplicate service identifiers: EMAS"):
            RegionDataset.from_geodataframe(service_gdf)

    def test_missing_identifier_column_rejected(self, service_gdf):
        with pytest.raises(ValueError, match="'county' column"):
            RegionDataset.from_geodataframe(service_gdf, GeographyLevel.COUNTY)

    def test_county_data_needs_subset_flag(self, county_gdf):
        with pytest.raises(ValueError, match="in_london"):
            RegionDataset.from_geodataframe(county_gdf.drop(columns="in_london"))

    def test_subset_selects_london(self, county_gdf):
        london = RegionDataset.from_geodataframe(county_gdf).subset()
        assert len(london) == 18
        assert london["in_london"].all()

    def test_only_true_flags_select_london(self, county_gdf):
        flags = county_gdf["in_london"].astype(object)
        flags[149] = np.nan
        flags[148] = "FALSE"
        flags[147] = "yes"
        county_gdf["in_london"] = flags
        london = RegionDataset.from_geodataframe(county_gdf).subset()
        assert len(london) == 18

    def test_london_flags(self):
        flags = pd.Series([True, False, None, np.nan, "TRUE", "FALSE", np.True_, 1.0, pd.NA])
        assert london_flags(flags).tolist() == [True, False, False, False, False, False, True, True, False]
        assert london_flags(flags).dtype == bool

    def test_service_data_has_no_subset(self, service_gdf):
        with pytest.raises(ValueError, match="no London subset"):
            RegionDataset.from_geodataframe(service_gdf).subset()


class TestAttachData:
    def test_inner_join_on_identifier(self, service_gdf):
        boundaries = service_gdf.drop(columns="hoaxes")
        values = pd.DataFrame({"service": ["EMAS", "LAS", "YAS"], "calls": [1, 2, 3]})
        joined = attach_data(boundaries, values)
        assert sorted(joined["service"]) == ["EMAS", "LAS", "YAS"]
        assert "geometry" in joined.columns
        assert joined.geometry.notna().all()

    def test_missing_join_column(self, county_gdf):
        with pytest.raises(ValueError, match="Cannot join on 'county'"):
            attach_data(county_gdf, pd.DataFrame({"name": ["x"], "v": [1]}))
