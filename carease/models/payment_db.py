from extensions import db
from datetime import datetime

class Payment(db.Model):
    __tablename__ = "payments"

    id = db.Column(db.String(64), primary_key=True)
    doctor_id = db.Column(db.String(64), db.ForeignKey("users.id"), nullable=False, index=True)
    doctor_name = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Float, nullable=False)
    date = db.Column(db.DateTime, default=datetime.utcnow)
    status = db.Column(db.String(20), default="pending")  # pending | paid
    type = db.Column(db.String(30), default="subscription")

    version = db.Column(db.Integer, nullable=False, default=1)
    __mapper_args__ = {"version_id_col": version}
