import json
import tempfile
import unittest
from pathlib import Path

from venturesim.catalog import load_catalog


class TestCatalog(unittest.TestCase):
    def test_builtin_profiles(self):
        cat = load_catalog()
        self.assertEqual(set(cat.titles()), {"Zero-G Manufacturing", "Space Tourism", "Satellite Services"})
        zg = cat.get("zero-g manufacturing")
        self.assertIsNotNone(zg)
        self.assertAlmostEqual(zg.revenue_multiplier, 1.2)
        self.assertAlmostEqual(zg.risk_factor, 15)
        self.assertEqual(zg.defaults.years, 10)
        self.assertAlmostEqual(zg.defaults.market_share, 0.08)
        self.assertEqual(cat.get("Space Tourism").risk_factor, 25)
        self.assertIsNone(cat.get("Lunar Mining"))
        self.assertIsNone(cat.get(None))

    def test_custom_path(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "models.json"
            path.write_text(json.dumps({"models": [
                {"title": "Orbital Data", "revenueMultiplier": 2, "riskFactor": 5, "defaults": {"years": 3}}
            ]}))
            cat = load_catalog(path)
            self.assertEqual(cat.titles(), ["Orbital Data"])
            self.assertEqual(cat.get("Orbital Data").defaults.years, 3)


if __name__ == "__main__":
    unittest.main()
