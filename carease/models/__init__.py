from carease.models.user_db import User
from carease.models.patient_db import Patient
from carease.models.visit_db import Visit
from carease.models.appointments_db import Appointment
from carease.models.payment_db import Payment
from carease.models.notification_db import Notification

__all__ = ["User", "Patient", "Visit", "Appointment", "Payment", "Notification"]
