from __future__ import annotations

import io
from datetime import date

from flask import Flask, g, jsonify, request, send_file

from ..common.serialization import attendance_to_dict
from ..common.streaming import sse_response
from ..common.web import json_api, namespace_required, parse_date_arg, parse_int_arg
from ..container import Container
from ..core.exceptions import ValidationError
from .export import class_period_xlsx, student_details_csv
from .periods import current_month_range, month_range, semester_range
from .service import summary_to_dict


def _resolve_range() -> tuple[date, date]:
    """start/end, or year+month, or year+semester; current month by default."""
    args = request.args
    if args.get("start") or args.get("end"):
        return parse_date_arg(args.get("start"), "start"), parse_date_arg(args.get("end"), "end")
    year = parse_int_arg(args.get("year") or str(date.today().year), "year")
    if args.get("month"):
        return month_range(year, parse_int_arg(args.get("month"), "month"))
    if args.get("semester"):
        return semester_range(year, parse_int_arg(args.get("semester"), "semester"))
    return current_month_range()


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<class_id>/report", methods=["GET"], endpoint="report_class")
    @namespace_required
    @json_api("Gagal memuat laporan kelas")
    def report_class(class_id: str):
        start, end = _resolve_range()
        summary = container.for_namespace(g.namespace).report_service.class_summary(
            class_id=class_id, start=start, end=end
        )
        return jsonify(
            {
                "success": True,
                "start": start.strftime("%Y-%m-%d"),
                "end": end.strftime("%Y-%m-%d"),
                "summary": summary_to_dict(summary),
            }
        )

    @app.route("/api/classes/<class_id>/report.xlsx", methods=["GET"], endpoint="report_class_xlsx")
    @namespace_required
    @json_api("Gagal mengekspor laporan kelas")
    def report_class_xlsx(class_id: str):
        start, end = _resolve_range()
        services = container.for_namespace(g.namespace)
        if not services.roster_service.get_class(class_id):
            raise ValidationError("Kelas tidak ditemukan")

        records = services.report_service.class_records(class_id=class_id, start=start, end=end)
        summary = services.report_service.class_summary(class_id=class_id, start=start, end=end)
        students = {s.student_id: s for s in services.roster_service.list_students(class_id)}

        data = class_period_xlsx(records=records, students=students, summary=summary, start=start, end=end)
        return send_file(
            io.BytesIO(data),
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=f"laporan_kelas_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}.xlsx",
        )

    @app.route("/api/classes/<class_id>/report/stream", methods=["GET"], endpoint="report_class_stream")
    @namespace_required
    @json_api("Gagal memuat laporan kelas")
    def report_class_stream(class_id: str):
        start, end = _resolve_range()
        reports = container.for_namespace(g.namespace).report_service
        return sse_response(
            lambda push: reports.watch_class_summary(class_id=class_id, start=start, end=end, on_summary=push),
            summary_to_dict,
        )

    @app.route("/api/students/<student_id>/report", methods=["GET"], endpoint="report_student")
    @namespace_required
    @json_api("Gagal memuat laporan siswa")
    def report_student(student_id: str):
        report = container.for_namespace(g.namespace).report_service.student_report(student_id=student_id)
        return jsonify(
            {
                "success": True,
                "student_id": report.student_id,
                "summary": summary_to_dict(report.summary),
                "details": [attendance_to_dict(r) for r in report.details],
            }
        )

    @app.route("/api/students/<student_id>/report.csv", methods=["GET"], endpoint="report_student_csv")
    @namespace_required
    @json_api("Gagal mengekspor laporan siswa")
    def report_student_csv(student_id: str):
        services = container.for_namespace(g.namespace)
        report = services.report_service.student_report(student_id=student_id)
        student = services.roster_service.get_student(student_id)

        return app.response_class(
            student_details_csv(report, student),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=absensi_siswa_{student_id}.csv"},
        )
