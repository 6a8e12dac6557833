from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.serialization import class_to_dict, student_to_dict
from ..common.streaming import sse_response
from ..common.web import json_api, json_error, namespace_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    def _services():
        return container.for_namespace(g.namespace)

    def _body() -> dict:
        return request.get_json(silent=True) or {}

    # ----- classes -----

    @app.route("/api/classes", methods=["GET"], endpoint="classes_list")
    @namespace_required
    @json_api("Gagal memuat kelas")
    def classes_list():
        classes = _services().roster_service.search_classes(request.args.get("q"))
        return jsonify({"success": True, "classes": [class_to_dict(c) for c in classes]})

    @app.route("/api/classes", methods=["POST"], endpoint="classes_create")
    @namespace_required
    @json_api("Gagal menambah kelas")
    def classes_create():
        created = _services().roster_service.create_class(_body().get("name", ""))
        return jsonify({"success": True, "class": class_to_dict(created)}), 201

    @app.route("/api/classes/<class_id>", methods=["PATCH"], endpoint="classes_rename")
    @namespace_required
    @json_api("Gagal mengubah kelas")
    def classes_rename(class_id: str):
        _services().roster_service.rename_class(class_id, _body().get("name", ""))
        return jsonify({"success": True})

    @app.route("/api/classes/<class_id>", methods=["DELETE"], endpoint="classes_delete")
    @namespace_required
    @json_api("Gagal menghapus kelas")
    def classes_delete(class_id: str):
        result = _services().cascade_service.delete_class(class_id)
        return jsonify(
            {
                "success": True,
                "deleted": result.deleted,
                "students_deleted": result.students_deleted,
                "attendance_deleted": result.attendance_deleted,
            }
        )

    @app.route("/api/classes/stream", methods=["GET"], endpoint="classes_stream")
    @namespace_required
    def classes_stream():
        roster = _services().roster_service
        return sse_response(
            lambda push: roster.subscribe_classes(push),
            lambda classes: [class_to_dict(c) for c in classes],
        )

    # ----- students -----

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @namespace_required
    @json_api("Gagal memuat siswa")
    def students_list():
        students = _services().roster_service.search_students(
            request.args.get("q"),
            class_id=request.args.get("class_id") or None,
        )
        return jsonify({"success": True, "students": [student_to_dict(s) for s in students]})

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @namespace_required
    @json_api("Gagal menambah siswa")
    def students_create():
        data = _body()
        created = _services().roster_service.create_student(data.get("name", ""), data.get("class_id", ""))
        return jsonify({"success": True, "student": student_to_dict(created)}), 201

    @app.route("/api/students/<student_id>", methods=["PATCH"], endpoint="students_rename")
    @namespace_required
    @json_api("Gagal mengubah siswa")
    def students_rename(student_id: str):
        _services().roster_service.rename_student(student_id, _body().get("name", ""))
        return jsonify({"success": True})

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="students_delete")
    @namespace_required
    @json_api("Gagal menghapus siswa")
    def students_delete(student_id: str):
        result = _services().cascade_service.delete_student(student_id)
        return jsonify({"success": True, "deleted": result.deleted, "attendance_deleted": result.attendance_deleted})

    @app.route("/api/classes/<class_id>/students/import", methods=["POST"], endpoint="students_import")
    @namespace_required
    @json_api("Terjadi kesalahan saat mengunggah")
    def students_import(class_id: str):
        text = _body().get("text")
        if text is None:
            return json_error("Pastikan daftar nama siswa tidak kosong dan kelas sudah dipilih.", 400)
        created = _services().bulk_import_service.import_students(class_id, text)
        return jsonify({"success": True, "created": created, "message": f"{created} siswa berhasil ditambahkan!"}), 201

    @app.route("/api/classes/<class_id>/students/stream", methods=["GET"], endpoint="students_stream")
    @namespace_required
    def students_stream(class_id: str):
        roster = _services().roster_service
        return sse_response(
            lambda push: roster.subscribe_students(push, class_id=class_id),
            lambda students: [student_to_dict(s) for s in students],
        )
