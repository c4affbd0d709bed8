"""
BreatheIndia - air quality and weather data for Indian cities.

The package aggregates the WAQI air-quality feed and the OpenWeatherMap
weather feed into one record per city, and fills in forecast, history and
whole records with synthetic data whenever the feeds cannot.
"""

__version__ = "0.3.0"
