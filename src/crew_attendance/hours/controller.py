from __future__ import annotations

import csv
import io
from datetime import date, timedelta

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError
from .service import REPORT_FIELDS, ReportData


def register(app: Flask, container: Container) -> None:
    def _window_args(*, required: bool) -> tuple[date, date]:
        start_s = request.args.get("start")
        end_s = request.args.get("end")
        if required and (not start_s or not end_s):
            raise ValidationError("start and end are required")

        today = date.today()
        start = parse_iso_date(start_s, "start") if start_s else today - timedelta(days=container.default_report_days)
        end = parse_iso_date(end_s, "end") if end_s else today
        return start, end

    def _write_report_csv(*, data: ReportData, filename: str):
        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
        writer.writeheader()
        for row in data.rows:
            writer.writerow(row)

        writer.writerow({})
        for s in data.summary:
            writer.writerow({"worker_id": s["worker_id"], "worked_hours": s["total_hours"]})
        writer.writerow({"worker_id": "TOTAL", "worked_hours": data.population_total})

        csv_bytes = out.getvalue().encode("utf-8-sig")
        return app.response_class(
            csv_bytes,
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/reports/hours", methods=["GET"], endpoint="hours_report")
    def hours_report():
        try:
            start, end = _window_args(required=False)
            data = container.hours_report_service.build_hours_report(
                start=start,
                end=end,
                worker_id=request.args.get("worker_id") or None,
            )
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        return jsonify({
            "success": True,
            "start": start.strftime("%Y-%m-%d"),
            "end": end.strftime("%Y-%m-%d"),
            "rows": data.rows,
            "summary": data.summary,
            "population_total": data.population_total,
            "population_total_minutes": data.population_total_minutes,
        }), 200

    @app.route("/api/reports/hours.csv", methods=["GET"], endpoint="hours_report_csv")
    def hours_report_csv():
        try:
            start, end = _window_args(required=True)
            worker_id = request.args.get("worker_id") or None
            data = container.hours_report_service.build_hours_report(start=start, end=end, worker_id=worker_id)
        except ValidationError as e:
            return jsonify({"success": False, "message": str(e)}), 400

        prefix = f"hours_{worker_id}" if worker_id else "hours_all"
        filename = f"{prefix}_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.csv"
        return _write_report_csv(data=data, filename=filename)
