from __future__ import annotations
from typing import Dict, List
import io
import zipfile

from venturesim.exports.reports import parameters_md, simulation_report_md
from venturesim.exports.writers import write_metrics, write_projection
from venturesim.projection.engine import AggregateMetrics, ProjectionPoint
from venturesim.store.records import SimulationRecord

MIMETYPES = {".csv": "text/csv", ".md": "text/markdown"}


def mimetype_for(name: str) -> str:
    for suffix, mimetype in MIMETYPES.items():
        if name.endswith(suffix):
            return mimetype
    return "application/octet-stream"


def build_artifacts(record: SimulationRecord, points: List[ProjectionPoint],
                    metrics: AggregateMetrics, viability: str) -> Dict[str, str]:
    row = {"simulation_id": record.id, "business_model": record.business_model,
           **metrics.to_record(), "viability": viability}
    warnings = [] if metrics.break_even_reached else ["break-even not reached within horizon"]
    return {
        "projection.csv": write_projection(p.to_dict() for p in points),
        "metrics.csv": write_metrics([row]),
        "parameters.md": parameters_md(record.parameters, warnings=warnings),
        "report.md": simulation_report_md(record.business_model, record.parameters, points, metrics, viability),
    }


def zip_artifacts(artifacts: Dict[str, str]) -> bytes:
    mem = io.BytesIO()
    with zipfile.ZipFile(mem, mode="w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, body in artifacts.items():
            zf.writestr(name, body)
    return mem.getvalue()
