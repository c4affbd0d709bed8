import unittest
from unittest.mock import AsyncMock, patch

import numpy as np

import app as dashboard
from breathe.classifier import classify
from breathe.gateway import AirQualityGateway
from breathe.locations import DEFAULT_CITIES, LocationResolver
from breathe.mock import generate_record
from breathe.models import CitySnapshot


class TestDashboardApi(unittest.TestCase):

    def setUp(self):
        self.client = dashboard.app.test_client()

    def test_01_current(self):
        """Record plus category and health advice for the current AQI"""
        record = generate_record("Pune", rng=np.random.default_rng(8))
        with patch.object(AirQualityGateway, "fetch_record", AsyncMock(return_value=record)) as fetch:
            response = self.client.get("/api/current?city=Pune")

        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        fetch.assert_awaited_once_with("Pune")
        self.assertEqual(data["location"], "Pune")
        self.assertEqual(data["provenance"], "synthetic")
        self.assertEqual(data["category"]["name"], classify(record.current.aqi).name)
        self.assertIn("mask", data["health"])
        self.assertEqual(len(data["forecast"]), 7)
        self.assertEqual(len(data["history"]), 24)

    def test_02_search(self):
        with patch.object(LocationResolver, "search", AsyncMock(return_value=DEFAULT_CITIES[:2])):
            response = self.client.get("/api/search?q=de")
        self.assertEqual(response.get_json(), [
            {"id": "1", "name": "Delhi", "country": "India"},
            {"id": "2", "name": "Mumbai", "country": "India"},
        ])

    def test_03_locate(self):
        with patch.object(LocationResolver, "locate_here", AsyncMock(return_value="Delhi")) as locate:
            response = self.client.get("/api/locate?lat=28.6&lon=77.2")
        self.assertEqual(response.get_json(), {"location": "Delhi"})
        locate.assert_awaited_once_with(28.6, 77.2)

    def test_04_locate_bad_coordinates(self):
        response = self.client.get("/api/locate?lat=north&lon=77.2")
        self.assertEqual(response.status_code, 400)

    def test_05_map_data(self):
        snapshots = [CitySnapshot("Delhi", 180, 28.7041, 77.1025, "Unhealthy", "air-unhealthy")]
        with patch.object(AirQualityGateway, "fetch_city_snapshots", AsyncMock(return_value=snapshots)) as batch:
            response = self.client.get("/api/map-data")

        names = batch.await_args.args[0]
        self.assertEqual(len(names), dashboard.settings.map_city_count)
        self.assertEqual(response.get_json()[0]["status"], "Unhealthy")

    def test_06_estimate(self):
        response = self.client.post("/api/estimate", json={
            "pm25": 150, "temperature": 10, "humidity": 0, "wind_speed": 0,
        })
        self.assertEqual(response.status_code, 200)
        data = response.get_json()
        self.assertEqual(data["aqi"], 125)
        self.assertEqual(data["category"]["name"], "Unhealthy for Sensitive Groups")

    def test_07_estimate_rejects_bad_input(self):
        self.assertEqual(self.client.post("/api/estimate", json={"pm25": "lots"}).status_code, 400)
        self.assertEqual(self.client.post("/api/estimate", json={"pm25": "inf"}).status_code, 400)
        self.assertEqual(self.client.post("/api/estimate", data="pm25=10").status_code, 400)

    def test_08_health(self):
        data = self.client.get("/api/health").get_json()
        self.assertEqual(data["status"], "ok")
        self.assertIn(data["config"]["aqicn_token"], ("configured", "missing"))


if __name__ == '__main__':
    unittest.main(verbosity=2)
