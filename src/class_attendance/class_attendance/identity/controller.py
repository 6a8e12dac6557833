from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import SESSION_UID, json_error
from ..container import Container
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    identity = container.identity_service

    @app.route("/api/session", methods=["POST"], endpoint="session_start")
    def session_start():
        """Sign in with a custom token when given, anonymously otherwise.

        An existing session is kept unless a token asks for another identity.
        """
        data = request.get_json(silent=True) or {}
        token = str(data.get("token") or "").strip()

        try:
            if token:
                uid = identity.sign_in_with_token(token)
            else:
                uid = session.get(SESSION_UID) or identity.sign_in_anonymously()
        except AuthenticationError as e:
            app.logger.error("Authentication error: %s", e)
            session.pop(SESSION_UID, None)
            return json_error(str(e), 401)

        session[SESSION_UID] = uid
        return jsonify({"success": True, "user_id": uid, "namespace": identity.namespace_for(uid).path})

    @app.route("/api/session", methods=["GET"], endpoint="session_info")
    def session_info():
        uid = session.get(SESSION_UID)
        if not uid:
            return json_error("Identitas pengguna belum tersedia", 401)
        return jsonify({"success": True, "user_id": uid, "namespace": identity.namespace_for(uid).path})

    @app.route("/api/session", methods=["DELETE"], endpoint="session_end")
    def session_end():
        session.clear()
        return jsonify({"success": True})
