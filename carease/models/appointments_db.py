from extensions import db

class Appointment(db.Model):
    __tablename__ = "appointments"

    id = db.Column(db.String(64), primary_key=True)
    patient_id = db.Column(db.String(64), nullable=False, index=True)
    patient_name = db.Column(db.String(100), nullable=False)
    doctor_id = db.Column(db.String(64), nullable=False, index=True)
    doctor_name = db.Column(db.String(100), nullable=False)
    date = db.Column(db.DateTime, nullable=False)
    status = db.Column(db.String(20), default="pending")  # pending | confirmed | cancelled
    notes = db.Column(db.Text)

    version = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}
