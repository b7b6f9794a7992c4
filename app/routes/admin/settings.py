import logging

from flask import request

from app.schemas.settings import SettingsDocumentUpdate, SettingsFieldUpdate
from app.services import settings_store
from app.utils import internal_error_response, not_found, ok, transactional, validate_schema

from . import admin_bp


# ------------------- Settings documents -------------------
@admin_bp.route("/settings/<document_name>", methods=["GET"])
def get_settings_document(document_name):
    fields = settings_store.get_document(document_name)
    if fields is None:
        return not_found("Settings document not found")
    return ok(fields, document=document_name)


@admin_bp.route("/settings/<document_name>", methods=["PUT"])
@validate_schema(SettingsDocumentUpdate)
def replace_settings_document(document_name):
    """Replace every field of a settings document.
    ---
    tags:
      - Admin Settings
    parameters:
      - {name: document_name, in: path, type: string, required: true}
      - in: body
        name: body
        schema:
          type: object
          properties:
            fields: {type: object}
    responses:
      200:
        description: Stored fields
    """
    try:
        with transactional("Failed to save settings document"):
            fields = settings_store.replace_document(document_name, request.validated_data.fields)
    except Exception as e:
        return internal_error_response(e, message="Failed to save settings")
    logging.info("Settings document %s replaced", document_name)
    return ok(fields, document=document_name)


@admin_bp.route("/settings/<document_name>/<field>", methods=["PATCH"])
@validate_schema(SettingsFieldUpdate)
def update_settings_field(document_name, field):
    if settings_store.get_document(document_name) is None:
        return not_found("Settings document not found")
    try:
        with transactional("Failed to update settings field"):
            fields = settings_store.update_field(document_name, field, request.validated_data.value)
    except Exception as e:
        return internal_error_response(e, message="Failed to save settings")
    return ok(fields, document=document_name)
