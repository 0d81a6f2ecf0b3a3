from family_game import db


def _iso(value):
    return value.isoformat() if value else None


class Game(db.Model):
    """An ended game, written once when the last two families merge."""
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    room_code = db.Column(db.String(6), nullable=False, index=True)
    created_at = db.Column(db.DateTime, nullable=False)
    ended_at = db.Column(db.DateTime, nullable=False, index=True)
    winner_player_name = db.Column(db.String(64), nullable=False)
    total_players = db.Column(db.Integer, nullable=False)
    players = db.relationship('GamePlayer', back_populates='game', cascade='all, delete-orphan',
                              order_by='GamePlayer.id')
    guesses = db.relationship('GameGuess', back_populates='game', cascade='all, delete-orphan',
                              order_by='GameGuess.id')

    def to_summary_dict(self):
        total_guesses = len(self.guesses)
        correct_guesses = sum(1 for g in self.guesses if g.was_correct)
        correct_percent = round(correct_guesses / total_guesses * 100) if total_guesses else 0
        return {
            'id': self.id,
            'roomCode': self.room_code,
            'createdAt': _iso(self.created_at),
            'endedAt': _iso(self.ended_at),
            'winnerPlayerName': self.winner_player_name,
            'totalPlayers': self.total_players,
            'durationSeconds': round((self.ended_at - self.created_at).total_seconds()),
            'totalGuesses': total_guesses,
            'correctPercent': correct_percent,
        }

    def to_dict(self):
        payload = self.to_summary_dict()
        payload['players'] = [p.to_dict() for p in self.players]
        payload['guesses'] = [g.to_dict() for g in self.guesses]
        return payload


class GamePlayer(db.Model):
    __tablename__ = 'game_player'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    player_name = db.Column(db.String(64), nullable=False)
    submitted_word = db.Column(db.String(64), nullable=False, default='')
    final_family_leader_name = db.Column(db.String(64), nullable=False)
    was_winner = db.Column(db.Boolean, default=False, nullable=False)
    game = db.relationship('Game', back_populates='players')

    def to_dict(self):
        return {
            'playerName': self.player_name,
            'submittedWord': self.submitted_word,
            'finalFamilyLeaderName': self.final_family_leader_name,
            'wasWinner': self.was_winner,
        }


class GameGuess(db.Model):
    __tablename__ = 'game_guess'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id'), nullable=False, index=True)
    guesser_player_name = db.Column(db.String(64), nullable=False)
    guessed_player_name = db.Column(db.String(64), nullable=False)
    guessed_word = db.Column(db.Text, nullable=False)
    was_correct = db.Column(db.Boolean, default=False, nullable=False)
    timestamp = db.Column(db.DateTime, nullable=False)
    game = db.relationship('Game', back_populates='guesses')

    def to_dict(self):
        return {
            'guesserPlayerName': self.guesser_player_name,
            'guessedPlayerName': self.guessed_player_name,
            'guessedWord': self.guessed_word,
            'wasCorrect': self.was_correct,
            'timestamp': _iso(self.timestamp),
        }
