from datetime import datetime, timezone

from cardflip import db


def _utcnow():
    return datetime.now(timezone.utc)


class ScoreRecord(db.Model):
    __tablename__ = 'card_flip_scores'
    id = db.Column(db.Integer, primary_key=True)
    player_name = db.Column(db.String(64), nullable=False)
    attempts = db.Column(db.Integer, nullable=False, default=0)
    matches = db.Column(db.Integer, nullable=False, default=0)
    elapsed_seconds = db.Column(db.Integer, nullable=False, default=0)
    completed_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    created_at = db.Column(db.DateTime(timezone=True), nullable=False, default=_utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'player_name': self.player_name,
            'attempts': self.attempts,
            'matches': self.matches,
            'elapsed_seconds': self.elapsed_seconds,
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }
