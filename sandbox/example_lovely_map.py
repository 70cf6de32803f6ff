#!/usr/bin/env python
"""
Example - county and ambulance service maps from random data

Joins random values onto the shipped boundaries, shows a county map and
saves every view of both geographies to the working directory.
"""

import logging

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from vanmaps import (
    attach_data,
    ambulance_boundary_data,
    county_boundary_data,
    plot_map,
    save_maps,
)

logging.basicConfig(level=logging.INFO)

rng = np.random.default_rng(2016)
counties = county_boundary_data()
services = ambulance_boundary_data()

# example county-level data
county_data = pd.DataFrame({
    'county': counties.county,
    'deaths': rng.normal(30, 8, len(counties)).round(),
})
# example ambulance-level data, without the Isle of Wight
service_data = pd.DataFrame({
    'service': services.service,
    'hoaxes': rng.normal(70, 8, len(services)).round(),
})
service_data = service_data[service_data.service != 'IOW']

county_data_spatial = attach_data(counties, county_data)
service_data_spatial = attach_data(services, service_data)

fig, ax = plot_map(county_data_spatial, 'deaths', 'My lovely map')
plot_map(county_data_spatial, 'deaths', 'My lovely map', london_only=True)
plot_map(service_data_spatial, 'hoaxes', 'My lovely map', breaks=[57, 65, 73, 83])

print(save_maps('lovely-map', 500, county_data_spatial, 'deaths', 'My lovely map'))
print(save_maps('lovely-map', 500, service_data_spatial, 'hoaxes', 'My lovely map',
                breaks=[57, 65, 73, 83], greyscale=True))

plt.show()
