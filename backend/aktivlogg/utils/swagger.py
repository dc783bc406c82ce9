"""Swagger/OpenAPI configuration for the application."""

# Swagger UI configuration
SWAGGER_URL = '/api/docs'
API_URL = '/api/swagger.json'

def _ref(name: str) -> dict:
    return {"application/json": {"schema": {"$ref": f"#/components/schemas/{name}"}}}

def _responses(success_code: str, success_description: str, *errors) -> dict:
    responses = {success_code: {"description": success_description, "content": _ref("Success")}}
    for code, description in errors:
        responses[code] = {"description": description, "content": _ref("Error")}
    return responses

def _body(properties: dict, required: list = None) -> dict:
    schema = {"type": "object", "properties": properties}
    if required:
        schema["required"] = required
    return {"required": True, "content": {"application/json": {"schema": schema}}}

SESSION_ID = [{"name": "session_id", "in": "path", "required": True, "schema": {"type": "integer"}}]
LOCATION_ID = [{"name": "location_id", "in": "path", "required": True, "schema": {"type": "integer"}}]
SECURED = [{"bearerAuth": []}]

def generate_swagger_spec():
    """Generate OpenAPI/Swagger specification."""
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "AKTIVLOGG API",
            "description": "Registrering av skytetrening med QR-kode",
            "version": "1.0.0"
        },
        "servers": [
            {
                "url": "http://127.0.0.1:5000/api",
                "description": "Development server"
            }
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {
                    "type": "http",
                    "scheme": "bearer",
                    "bearerFormat": "JWT"
                }
            },
            "schemas": {
                "TrainingSession": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer"},
                        "organization_id": {"type": "integer"},
                        "member_id": {"type": "integer"},
                        "location_id": {"type": "integer"},
                        "start_time": {"type": "string", "format": "date-time"},
                        "end_time": {"type": "string", "format": "date-time", "nullable": True},
                        "duration_minutes": {"type": "integer", "nullable": True},
                        "discipline": {"type": "string", "enum": ["NSF", "DFS", "DSSN"]},
                        "verified": {"type": "boolean"},
                        "verified_by": {"type": "string", "nullable": True},
                        "verification_time": {"type": "string", "format": "date-time", "nullable": True},
                        "manual_entry": {"type": "boolean"},
                        "notes": {"type": "string", "nullable": True},
                        "location_name": {"type": "string"},
                        "member_name": {"type": "string"}
                    }
                },
                "TrainingLocation": {
                    "type": "object",
                    "properties": {
                        "id": {"type": "integer"},
                        "organization_id": {"type": "integer"},
                        "name": {"type": "string"},
                        "code": {"type": "string"},
                        "description": {"type": "string", "nullable": True},
                        "active": {"type": "boolean"},
                        "nsf_enabled": {"type": "boolean"},
                        "dfs_enabled": {"type": "boolean"},
                        "dssn_enabled": {"type": "boolean"},
                        "disciplines": {"type": "array", "items": {"type": "string"}}
                    }
                },
                "ScanOutcome": {
                    "type": "object",
                    "properties": {
                        "outcome": {"type": "string", "enum": ["success", "duplicate_day", "error"]},
                        "error_kind": {
                            "type": "string",
                            "enum": ["empty_code", "location_not_found", "duplicate_day",
                                     "registration_failed", "authentication_required"]
                        },
                        "session": {"$ref": "#/components/schemas/TrainingSession"},
                        "redirect_to": {"type": "string"},
                        "redirect_after_ms": {"type": "integer"},
                        "modal_auto_close_ms": {"type": "integer"},
                        "banner_auto_dismiss_ms": {"type": "integer"}
                    }
                },
                "Error": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean"},
                        "message": {"type": "string"},
                        "status_code": {"type": "integer"},
                        "data": {"$ref": "#/components/schemas/ScanOutcome"}
                    }
                },
                "Success": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean", "default": False},
                        "message": {"type": "string"},
                        "data": {"type": "object"}
                    }
                }
            }
        },
        "paths": {
            "/scanner/scan": {
                "post": {
                    "tags": ["Scanner"],
                    "summary": "Register training from a scanned QR payload",
                    "security": SECURED,
                    "requestBody": _body({
                        "payload": {"type": "string", "description": "Raw decoded QR text"},
                        "code": {"type": "string", "description": "Location code entered by hand"}
                    }),
                    "responses": _responses(
                        "201", "Training session registered",
                        ("400", "Empty QR code"),
                        ("401", "Authentication required"),
                        ("404", "Unknown location code"),
                        ("409", "Already registered today"),
                        ("500", "Registration failed")
                    )
                }
            },
            "/training/sessions/mine": {
                "get": {
                    "tags": ["Training"],
                    "summary": "Training log of the calling member",
                    "security": SECURED,
                    "responses": _responses("200", "Sessions, newest first", ("401", "Authentication required"))
                }
            },
            "/training/sessions": {
                "get": {
                    "tags": ["Training"],
                    "summary": "Sessions in the organization",
                    "security": SECURED,
                    "parameters": [
                        {"name": "pending", "in": "query", "schema": {"type": "boolean"}}
                    ],
                    "responses": _responses("200", "Sessions", ("403", "Range officer access required"))
                }
            },
            "/training/sessions/manual": {
                "post": {
                    "tags": ["Training"],
                    "summary": "Add a verified session on behalf of a member",
                    "security": SECURED,
                    "requestBody": _body({
                        "member_id": {"type": "integer"},
                        "location_id": {"type": "integer"},
                        "start_time": {"type": "string", "format": "date-time"},
                        "duration_minutes": {"type": "integer"},
                        "notes": {"type": "string"}
                    }, required=["member_id", "location_id"]),
                    "responses": _responses(
                        "201", "Session added",
                        ("403", "Admin access required"),
                        ("404", "Member or location not found"),
                        ("409", "Member already has a session that day")
                    )
                }
            },
            "/training/sessions/{session_id}": {
                "patch": {
                    "tags": ["Training"],
                    "summary": "Update notes, end time or duration",
                    "security": SECURED,
                    "parameters": SESSION_ID,
                    "requestBody": _body({
                        "notes": {"type": "string"},
                        "end_time": {"type": "string", "format": "date-time"},
                        "duration_minutes": {"type": "integer"}
                    }),
                    "responses": _responses("200", "Session updated", ("403", "Not your session"),
                                            ("404", "Session not found"))
                },
                "delete": {
                    "tags": ["Training"],
                    "summary": "Reject a pending session",
                    "security": SECURED,
                    "parameters": SESSION_ID,
                    "responses": _responses("200", "Session rejected", ("404", "Session not found"))
                }
            },
            "/training/sessions/{session_id}/verify": {
                "post": {
                    "tags": ["Training"],
                    "summary": "Approve a pending session",
                    "security": SECURED,
                    "parameters": SESSION_ID,
                    "responses": _responses("200", "Session verified", ("404", "Session not found"))
                }
            },
            "/locations": {
                "get": {
                    "tags": ["Locations"],
                    "summary": "Training locations of the organization",
                    "security": SECURED,
                    "responses": _responses("200", "Locations")
                },
                "post": {
                    "tags": ["Locations"],
                    "summary": "Create a training location",
                    "security": SECURED,
                    "requestBody": _body({
                        "name": {"type": "string"},
                        "code": {"type": "string", "description": "Generated when omitted"},
                        "description": {"type": "string"},
                        "nsf_enabled": {"type": "boolean"},
                        "dfs_enabled": {"type": "boolean"},
                        "dssn_enabled": {"type": "boolean"}
                    }, required=["name"]),
                    "responses": _responses("201", "Location created", ("409", "Code already exists"))
                }
            },
            "/locations/{location_id}": {
                "put": {
                    "tags": ["Locations"],
                    "summary": "Update a training location",
                    "security": SECURED,
                    "parameters": LOCATION_ID,
                    "responses": _responses("200", "Location updated", ("404", "Location not found"))
                },
                "delete": {
                    "tags": ["Locations"],
                    "summary": "Deactivate a training location",
                    "security": SECURED,
                    "parameters": LOCATION_ID,
                    "responses": _responses("200", "Location deactivated", ("404", "Location not found"))
                }
            },
            "/locations/{location_id}/qr": {
                "get": {
                    "tags": ["Locations"],
                    "summary": "QR code for the location's scanner link",
                    "security": SECURED,
                    "parameters": LOCATION_ID,
                    "responses": _responses("200", "PNG data URL and scanner link")
                }
            }
        }
    }
