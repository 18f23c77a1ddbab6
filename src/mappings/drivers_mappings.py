"""
Driver header aliases for bulk spreadsheet uploads

Each entry names one header spelling seen in driver/employee rosters and the
canonical field it feeds. Several entries may share a target field.
"""

DRIVERS_MAPPINGS = {
    "id": "bulk_upload_drivers",
    "metadata": {
        "entity": "driver",
        "notes": "Employee rosters exported from HR tools or kept by hand",
    },
    "mappings": [
        # Name
        {"target_field": "name", "source_field": "name"},
        {"target_field": "name", "source_field": "driver"},
        {"target_field": "name", "source_field": "driver_name"},
        {"target_field": "name", "source_field": "employee_name"},
        # Role
        {"target_field": "role", "source_field": "role"},
        {"target_field": "role", "source_field": "designation"},
        # Assigned vehicle
        {"target_field": "vehicle_registration_no", "source_field": "vehicle_registration_no"},
        {"target_field": "vehicle_registration_no", "source_field": "vehicle"},
        {"target_field": "vehicle_registration_no", "source_field": "vehicle_registration"},
        {"target_field": "vehicle_registration_no", "source_field": "registration_no"},
        {"target_field": "vehicle_registration_no", "source_field": "reg no"},
        {"target_field": "vehicle_registration_no", "source_field": "reg_no"},
    ],
}
