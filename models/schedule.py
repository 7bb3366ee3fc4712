"""
Scheduled report models for the Academic Report Engine
Schedule descriptors are stored only; nothing executes them
"""

from database import db
from datetime import datetime

class ScheduledReport(db.Model):
    """Stored schedule descriptor for a recurring report"""
    __tablename__ = 'scheduled_reports'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    type = db.Column(db.String(50), nullable=False)
    format = db.Column(db.String(20), nullable=False)
    schedule = db.Column(db.String(50), nullable=False)
    next_run = db.Column(db.Date, nullable=False)
    recipients = db.Column(db.JSON, default=list)
    parameters = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        """Convert schedule descriptor to dictionary"""
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'format': self.format,
            'schedule': self.schedule,
            'next_run': self.next_run.isoformat() if self.next_run else None,
            'recipients': self.recipients or [],
            'parameters': self.parameters or {},
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<ScheduledReport {self.name} ({self.schedule}) next {self.next_run}>'
