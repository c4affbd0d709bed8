import unittest

from breathe.classifier import CATEGORIES, band_index, classify, color_hex, color_token, recommendations


class TestClassifier(unittest.TestCase):

    def test_01_band_boundaries(self):
        """Upper bounds are inclusive"""
        cases = {
            0: "Good", 50: "Good",
            51: "Moderate", 100: "Moderate",
            101: "Unhealthy for Sensitive Groups", 150: "Unhealthy for Sensitive Groups",
            151: "Unhealthy", 200: "Unhealthy",
            201: "Very Unhealthy", 300: "Very Unhealthy",
            301: "Hazardous", 500: "Hazardous",
        }
        for aqi, name in cases.items():
            with self.subTest(aqi=aqi):
                self.assertEqual(classify(aqi).name, name)

    def test_02_out_of_range_values(self):
        self.assertEqual(band_index(-20), 0)
        self.assertEqual(band_index(50.5), 1)
        self.assertEqual(band_index(900), 5)

    def test_03_colours(self):
        self.assertEqual(color_token(42), "air-good")
        self.assertEqual(color_token(175), "air-unhealthy")
        self.assertEqual(color_hex(42), "#34d399")
        self.assertEqual(color_hex(450), "#7f1d1d")

    def test_04_every_band_has_advice(self):
        """Six categories, six sets of advice, all fields filled in"""
        self.assertEqual(len(CATEGORIES), 6)
        for aqi in (10, 75, 125, 175, 250, 400):
            advice = recommendations(aqi)
            for text in advice.to_dict().values():
                self.assertTrue(text)

    def test_05_advice_gets_stricter(self):
        self.assertEqual(recommendations(20).mask, "Mask is not required.")
        self.assertIn("wear a mask", recommendations(250).mask)

    def test_06_category_json_shape(self):
        self.assertEqual(set(classify(80).to_dict()), {"name", "description", "color"})


if __name__ == '__main__':
    unittest.main(verbosity=2)
