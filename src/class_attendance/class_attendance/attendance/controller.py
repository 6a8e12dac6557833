from __future__ import annotations

from datetime import date

from flask import Flask, g, jsonify, request

from ..common.serialization import save_result_to_dict
from ..common.web import json_api, namespace_required, parse_date_arg
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    @app.route("/api/classes/<class_id>/attendance", methods=["GET"], endpoint="attendance_day")
    @namespace_required
    @json_api("Gagal memuat absensi")
    def attendance_day(class_id: str):
        day = parse_date_arg(request.args.get("date"), "date", default=date.today())
        entries = container.for_namespace(g.namespace).attendance_service.load_day(class_id=class_id, day=day)
        return jsonify(
            {
                "success": True,
                "date": day.strftime("%Y-%m-%d"),
                "entries": {student_id: e.to_dict() for student_id, e in entries.items()},
            }
        )

    @app.route("/api/classes/<class_id>/attendance", methods=["PUT"], endpoint="attendance_save")
    @namespace_required
    @json_api("Gagal menyimpan absensi")
    def attendance_save(class_id: str):
        data = request.get_json(silent=True) or {}
        day = parse_date_arg(data.get("date") or request.args.get("date"), "date", default=date.today())
        entries = data.get("entries")
        if not isinstance(entries, dict):
            raise ValidationError("Data absensi tidak valid")

        result = container.for_namespace(g.namespace).attendance_service.save_day(
            class_id=class_id,
            day=day,
            entries=entries,
        )
        return jsonify({"success": True, "message": "Absensi berhasil disimpan!", "result": save_result_to_dict(result)})
