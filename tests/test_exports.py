import csv
import io
import unittest
import zipfile

from venturesim.exports.bundle import build_artifacts, mimetype_for, zip_artifacts
from venturesim.exports.reports import break_even_text, parameters_md, simulation_report_md
from venturesim.exports.writers import SCHEMAS, write_comparison, write_projection
from venturesim.projection.engine import AggregateMetrics, project
from venturesim.projection.parameters import BusinessModelProfile, SimulationParameters
from venturesim.store.records import SimulationRecord

PROFILE = BusinessModelProfile(title="Satellite Services", revenue_multiplier=1.0, risk_factor=10)
PARAMS = SimulationParameters(50_000_000, 20_000_000, 800_000_000, 0.12, 28, 4)


class TestWriters(unittest.TestCase):
    def test_projection_csv(self):
        points, _ = project(PARAMS, PROFILE)
        text = write_projection(p.to_dict() for p in points)
        rows = list(csv.DictReader(io.StringIO(text)))
        self.assertEqual(list(rows[0].keys()), SCHEMAS["projection"])
        self.assertEqual(len(rows), 5)
        self.assertEqual(rows[0]["label"], "Year 0")
        self.assertEqual(rows[0]["costs"], "70000000")

    def test_comparison_csv_ignores_extra_columns(self):
        text = write_comparison([{"id": "s1", "name": "X", "roi": 1, "profit_margin": 2,
                                  "net_profit_k": 3, "extra": "nope"}])
        self.assertEqual(text.splitlines()[0], ",".join(SCHEMAS["comparison"]))
        self.assertNotIn("nope", text)


class TestReports(unittest.TestCase):
    def test_parameters_md_warnings(self):
        md = parameters_md({"years": 4}, warnings=["break-even not reached within horizon"])
        self.assertIn("- years: 4", md)
        self.assertIn("## Warnings", md)

    def test_break_even_text(self):
        self.assertEqual(break_even_text(AggregateMetrics(0, 1, -1, -100, 0, None)), "not reached within horizon")
        self.assertEqual(break_even_text(AggregateMetrics(1, 0, 1, 0, 100, 0)), "Year 0")

    def test_report(self):
        points, metrics = project(PARAMS, PROFILE)
        md = simulation_report_md("Satellite Services", PARAMS.to_dict(), points, metrics, "High Risk")
        self.assertTrue(md.startswith("# Satellite Services - Simulation Report"))
        self.assertIn("**Viability:** High Risk", md)
        self.assertIn("| Year 4 |", md)


class TestBundle(unittest.TestCase):
    def test_artifacts_and_zip(self):
        rec = SimulationRecord(id="s_1", user_id="u1", business_model="Satellite Services",
                               parameters=PARAMS.to_dict(), results={})
        points, metrics = project(PARAMS, PROFILE)
        arts = build_artifacts(rec, points, metrics, "Viable")
        self.assertEqual(set(arts), {"projection.csv", "metrics.csv", "parameters.md", "report.md"})
        row = next(csv.DictReader(io.StringIO(arts["metrics.csv"])))
        self.assertEqual(row["simulation_id"], "s_1")
        self.assertEqual(row["viability"], "Viable")
        self.assertEqual(int(row["total_costs"]), metrics.to_record()["total_costs"])

        data = zip_artifacts(arts)
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            self.assertEqual(sorted(zf.namelist()), sorted(arts))
            self.assertEqual(zf.read("report.md").decode(), arts["report.md"])

    def test_mimetypes(self):
        self.assertEqual(mimetype_for("metrics.csv"), "text/csv")
        self.assertEqual(mimetype_for("report.md"), "text/markdown")
        self.assertEqual(mimetype_for("x.bin"), "application/octet-stream")


if __name__ == "__main__":
    unittest.main()
