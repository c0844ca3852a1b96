from datetime import datetime
from typespeed import db

VALID_LEVELS = ('Easy', 'Normal', 'Hard')


class Score(db.Model):
    __tablename__ = 'scores'
    id = db.Column(db.Integer, primary_key=True)
    level = db.Column(db.String(20), nullable=False, index=True)  # Easy, Normal, Hard
    score = db.Column(db.Integer, nullable=False)
    total = db.Column(db.Integer, nullable=False)
    percentage = db.Column(db.Integer, nullable=False, default=0)
    # Assigned by the server on insert, never taken from the client
    date_played = db.Column(db.DateTime(), nullable=False, default=datetime.now, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'level': self.level,
            'score': self.score,
            'total': self.total,
            'percentage': self.percentage,
            'date': self.date_played.strftime('%Y-%m-%d %H:%M:%S') if self.date_played else None,
        }
