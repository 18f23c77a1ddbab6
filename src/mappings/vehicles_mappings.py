"""
Vehicle header aliases for bulk spreadsheet uploads

Each entry names one header spelling seen in fleet spreadsheets and the
canonical field it feeds. Several entries may share a target field.
"""

VEHICLES_MAPPINGS = {
    "id": "bulk_upload_vehicles",
    "metadata": {
        "entity": "vehicle",
        "notes": "Fleet owners' own spreadsheets, header spelling varies per file",
    },
    "mappings": [
        # Registration number - plate as printed on the vehicle
        {"target_field": "registration_no", "source_field": "registration_no"},
        {"target_field": "registration_no", "source_field": "registration"},
        {"target_field": "registration_no", "source_field": "vehicle_registration_no"},
        {"target_field": "registration_no", "source_field": "reg no"},
        {"target_field": "registration_no", "source_field": "reg_no"},
        {"target_field": "registration_no", "source_field": "vehicle number"},
        {"target_field": "registration_no", "source_field": "vehicle no"},
        {"target_field": "registration_no", "source_field": "regnumber"},
        {"target_field": "registration_no", "source_field": "regnum"},
        {"target_field": "registration_no", "source_field": "plate"},
        # Vehicle type
        {"target_field": "vehicle_type", "source_field": "vehicle_type"},
        {"target_field": "vehicle_type", "source_field": "type"},
        {"target_field": "vehicle_type", "source_field": "category"},
        {"target_field": "vehicle_type", "source_field": "bodytype"},
        # Chassis number / VIN
        {"target_field": "chassis_number", "source_field": "chassis_number"},
        {"target_field": "chassis_number", "source_field": "chassis"},
        {"target_field": "chassis_number", "source_field": "vin"},
        {"target_field": "chassis_number", "source_field": "vinnumber"},
        {"target_field": "chassis_number", "source_field": "serialnumber"},
    ],
}
