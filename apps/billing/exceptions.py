# apps/billing/exceptions.py
"""
Billing errors.

Eligibility failures are Django ValidationErrors with a distinct code so the
API can return a 400 with an actionable message; an unknown vehicle is an
ObjectDoesNotExist so it maps to 404.
"""
from django.core.exceptions import ObjectDoesNotExist, ValidationError


class VehicleNotFound(ObjectDoesNotExist):
    """The vehicle does not exist (or belongs to another tenant)."""

    def __init__(self, vehicle_id):
        self.vehicle_id = vehicle_id
        super().__init__(f"Vehicle {vehicle_id} not found")


class VehicleNotBillable(ValidationError):
    """
    The vehicle fails a monthly billing eligibility check.

    Codes: vehicle_inactive, vehicle_sold, vehicle_no_owner,
    monthly_fee_not_set
    """

    MESSAGES = {
        'vehicle_inactive': "Vehicle is inactive",
        'vehicle_sold': "Vehicle has been sold",
        'vehicle_no_owner': "Vehicle has no owner assigned",
        'monthly_fee_not_set': "Vehicle has no monthly fee set",
    }

    def __init__(self, code):
        super().__init__(self.MESSAGES[code], code=code)


class InvoiceNumberExhausted(Exception):
    """Could not obtain a unique invoice number after several attempts."""
