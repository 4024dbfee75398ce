from extensions import db
from datetime import datetime

class Visit(db.Model):
    __tablename__ = "visits"

    id = db.Column(db.String(64), primary_key=True)
    # patient_id may point at a patient record or a patient user, so no FK
    patient_id = db.Column(db.String(64), nullable=False, index=True)
    patient_name = db.Column(db.String(100), nullable=False)
    doctor_id = db.Column(db.String(64), nullable=False, index=True)
    doctor_name = db.Column(db.String(100), nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow)
    disease = db.Column(db.Text, default="")
    medicine = db.Column(db.Text, default="")
    next_visit = db.Column(db.DateTime)

    version = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}
