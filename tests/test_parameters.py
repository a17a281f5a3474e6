import math
import unittest

from venturesim.projection.parameters import (
    MAX_YEARS,
    SimulationParameters,
    coerce_number,
    parameters_from_dict,
    validate_parameters,
)


class TestCoercion(unittest.TestCase):
    def test_numbers_and_numeric_strings(self):
        self.assertEqual(coerce_number(3), 3.0)
        self.assertEqual(coerce_number(2.5), 2.5)
        self.assertEqual(coerce_number("1e6"), 1_000_000.0)
        self.assertEqual(coerce_number(" 42 "), 42.0)

    def test_malformed_values_become_zero(self):
        for raw in (None, "", "abc", float("nan"), math.inf, -math.inf, True, [], {}):
            self.assertEqual(coerce_number(raw), 0.0, f"{raw!r}")

    def test_each_field_falls_back_to_zero(self):
        p = parameters_from_dict({
            "launchCost": None,
            "operationalCost": "",
            "marketSize": "n/a",
            "marketShare": float("nan"),
            "growthRate": None,
            "years": "",
        })
        self.assertEqual(p, SimulationParameters())

    def test_missing_fields_and_unknown_keys(self):
        p = parameters_from_dict({"launchCost": 5, "colour": "blue"})
        self.assertEqual(p.launch_cost, 5.0)
        self.assertEqual(p.market_size, 0.0)
        self.assertEqual(p.years, 0)
        self.assertEqual(parameters_from_dict(None), SimulationParameters())

    def test_snake_and_camel_keys(self):
        a = parameters_from_dict({"launch_cost": 10, "market_share": 0.1, "years": 4})
        b = parameters_from_dict({"launchCost": 10, "marketShare": 0.1, "years": 4})
        self.assertEqual(a, b)

    def test_years_whole_and_non_negative(self):
        self.assertEqual(parameters_from_dict({"years": 7.9}).years, 7)
        self.assertEqual(parameters_from_dict({"years": -3}).years, 0)

    def test_years_capped(self):
        self.assertEqual(parameters_from_dict({"years": 3000}).years, MAX_YEARS)
        self.assertEqual(parameters_from_dict({"years": 10**9}).years, MAX_YEARS)

    def test_non_mapping_reads_as_empty(self):
        for raw in (["x"], "launchCost=5", 42):
            self.assertEqual(parameters_from_dict(raw), SimulationParameters(), f"{raw!r}")

    def test_to_dict_uses_stored_keys(self):
        p = SimulationParameters(1, 2, 3, 0.4, 5, 6)
        self.assertEqual(p.to_dict(), {
            "launchCost": 1, "operationalCost": 2, "marketSize": 3,
            "marketShare": 0.4, "growthRate": 5, "years": 6,
        })
        self.assertEqual(parameters_from_dict(p.to_dict()), p)


class TestValidation(unittest.TestCase):
    def test_valid(self):
        validate_parameters(SimulationParameters(100, 30, 1500, 0.08, 35, 10))  # should not raise

    def test_guardrails(self):
        bad = [
            SimulationParameters(100, 30, 1500, 1.5, 35, 10),
            SimulationParameters(100, 30, 1500, -0.1, 35, 10),
            SimulationParameters(100, 30, 1500, 0.08, 35, 0),
            SimulationParameters(-1, 30, 1500, 0.08, 35, 10),
            SimulationParameters(100, -30, 1500, 0.08, 35, 10),
            SimulationParameters(100, 30, -1, 0.08, 35, 10),
            SimulationParameters(100, 30, 1500, 0.08, 35, MAX_YEARS + 1),
        ]
        for p in bad:
            with self.assertRaises(ValueError):
                validate_parameters(p)


if __name__ == "__main__":
    unittest.main()
