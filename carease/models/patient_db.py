from extensions import db
from datetime import datetime

class Patient(db.Model):
    __tablename__ = "patients"

    id = db.Column(db.String(64), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    cnic = db.Column(db.String(30), unique=True, nullable=False)
    phone = db.Column(db.String(30), nullable=False)
    email = db.Column(db.String(120), default="")
    disease = db.Column(db.Text, default="")
    medicine = db.Column(db.Text, default="")
    date_added = db.Column(db.DateTime, default=datetime.utcnow)
    next_visit = db.Column(db.DateTime)
    doctor_id = db.Column(db.String(64), db.ForeignKey("users.id"), nullable=False, index=True)

    version = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}
    __table_args__ = (db.UniqueConstraint("phone", "doctor_id", name="uq_patient_phone_doctor"),)
