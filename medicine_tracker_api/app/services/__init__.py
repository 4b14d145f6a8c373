"""
Service layer.

``MedicineStore`` owns persistence and ``MedicineService`` owns the
business rules, so API handlers stay free of both.
"""
