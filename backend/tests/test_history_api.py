from datetime import datetime, timedelta, timezone

import pytest

from family_game.services.games import Family, GameState, GuessRecord, Player, Room
from family_game.services.games.history import parse_limit
from family_game.services.games.persistence import persist_ended_game

STARTED = datetime(2025, 1, 1, 0, 0, tzinfo=timezone.utc)


def seed_game(code='ABCDEF', ended_after=timedelta(minutes=10), guesses=None):
    players = {
        's1': Player(id='s1', name='Alice', room_code=code, is_host=True),
        's2': Player(id='s2', name='Bob', room_code=code),
    }
    if guesses is None:
        guesses = [
            GuessRecord('s1', 's2', 'pear', False, STARTED + timedelta(minutes=1)),
            GuessRecord('s2', 's1', 'apple', True, STARTED + timedelta(minutes=5)),
        ]
    room = Room(
        code=code,
        host_id='s1',
        state=GameState.ENDED,
        players=players,
        created_at=STARTED,
        words={'s1': 'apple', 's2': 'banana'},
        families=[Family(leader_id='s2', member_ids=['s2', 's1'])],
        turn_order=['s1', 's2'],
        guesses=guesses,
    )
    return persist_ended_game(room, 's2', ended_at=STARTED + ended_after)


def test_list_games_empty(client):
    res = client.get('/api/games')
    assert res.status_code == 200
    assert res.get_json() == []


def test_list_games_summary(client):
    seed_game()
    res = client.get('/api/games')
    assert res.status_code == 200
    [summary] = res.get_json()
    assert summary['roomCode'] == 'ABCDEF'
    assert summary['winnerPlayerName'] == 'Bob'
    assert summary['totalPlayers'] == 2
    assert summary['durationSeconds'] == 600
    assert summary['totalGuesses'] == 2
    assert summary['correctPercent'] == 50
    assert summary['createdAt'].startswith('2025-01-01T00:00:00')
    assert summary['endedAt'].startswith('2025-01-01T00:10:00')


def test_list_games_newest_first(client):
    seed_game('AAAAAA', ended_after=timedelta(minutes=5))
    seed_game('BBBBBB', ended_after=timedelta(minutes=30))
    seed_game('CCCCCC', ended_after=timedelta(minutes=15))
    codes = [g['roomCode'] for g in client.get('/api/games').get_json()]
    assert codes == ['BBBBBB', 'CCCCCC', 'AAAAAA']


def test_list_games_respects_limit(client):
    for i in range(3):
        seed_game(f'ROOM{i}A', ended_after=timedelta(minutes=i + 1))
    assert len(client.get('/api/games?limit=2').get_json()) == 2
    assert len(client.get('/api/games?limit=abc').get_json()) == 3
    assert len(client.get('/api/games?limit=100').get_json()) == 3


def test_correct_percent_without_guesses(client):
    seed_game(guesses=[])
    [summary] = client.get('/api/games').get_json()
    assert summary['totalGuesses'] == 0
    assert summary['correctPercent'] == 0


def test_game_detail(client):
    game = seed_game()
    res = client.get(f'/api/games/{game.id}')
    assert res.status_code == 200
    detail = res.get_json()
    assert detail['id'] == game.id
    assert detail['players'] == [
        {'playerName': 'Alice', 'submittedWord': 'apple', 'finalFamilyLeaderName': 'Bob', 'wasWinner': True},
        {'playerName': 'Bob', 'submittedWord': 'banana', 'finalFamilyLeaderName': 'Bob', 'wasWinner': True},
    ]
    assert [(g['guesserPlayerName'], g['guessedPlayerName'], g['guessedWord'], g['wasCorrect'])
            for g in detail['guesses']] == [
        ('Alice', 'Bob', 'pear', False),
        ('Bob', 'Alice', 'apple', True),
    ]
    assert detail['guesses'][0]['timestamp'].startswith('2025-01-01T00:01:00')


def test_game_detail_not_found(client):
    res = client.get('/api/games/9999')
    assert res.status_code == 404
    assert res.get_json() == {'error': 'Game not found'}


@pytest.mark.parametrize('raw,expected', [
    (None, 20),
    ('', 20),
    ('abc', 20),
    ('0', 20),
    ('-5', 20),
    ('10', 10),
    ('50', 50),
    ('100', 50),
])
def test_parse_limit(raw, expected):
    assert parse_limit(raw) == expected
