# trivia.py
"""Footballer trivia oracle.

Given a row and a column label (two clubs), the oracle knows which
footballers played for both. Curated scenarios fix one canonical answer
per cell and are used for league matches.
"""
import json
import os
import random
from typing import Dict, List, Optional, Set

from models import Categories

# Used when data/valid_games.json is missing
FALLBACK_GAME = {
    "rows": ["Barcelona", "Real Madrid", "Manchester United"],
    "potentialCols": ["PSG", "Juventus", "Bayern Munich"],
}

DECOY_COUNT = 3


def _load_json(path: str, default):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except FileNotFoundError:
        print(f"⚠️ {os.path.basename(path)} not found, using fallback.")
    except (OSError, ValueError) as e:
        print(f"❌ Error loading {path}: {e}")
    return default


class TriviaOracle:
    """Answer lookup backed by a footballer catalogue.

    players:   [{"name": str, "teams": [str]}]
    games:     [{"rows": [3 labels], "potentialCols": [>=3 labels]}]
    scenarios: [{"rows", "cols", "answers": {"Row|Col": name}}]
    """

    def __init__(self, players: List[Dict], games: List[Dict] = None, scenarios: List[Dict] = None,
                 rng: random.Random = None):
        self.players = players
        self.games = games or [FALLBACK_GAME]
        self.scenarios = scenarios or []
        self.rng = rng or random.Random()
        self._teams: Dict[str, Set[str]] = {p["name"]: set(p.get("teams", [])) for p in players}

    @classmethod
    def from_directory(cls, data_dir: str) -> "TriviaOracle":
        players = _load_json(os.path.join(data_dir, "players.json"), [])
        games = _load_json(os.path.join(data_dir, "valid_games.json"), [])
        scenarios = _load_json(os.path.join(data_dir, "scenarios.json"), [])
        print(f"📚 Loaded {len(players)} players, {len(games)} grids, {len(scenarios)} scenarios from {data_dir}")
        return cls(players, games, scenarios)

    # --- lookups ---

    def all_names(self) -> List[str]:
        return list(self._teams.keys())

    def valid_answers(self, row_label: str, col_label: str) -> Set[str]:
        return {
            name for name, teams in self._teams.items()
            if row_label in teams and col_label in teams
        }

    def is_valid(self, answer: str, row_label: str, col_label: str) -> bool:
        teams = self._teams.get(answer)
        return bool(teams) and row_label in teams and col_label in teams

    # --- category generation ---

    def random_categories(self) -> Categories:
        """Free mode: 3 fixed rows, 3 columns sampled from the config's pool."""
        game = self.rng.choice(self.games)
        pool = list(game.get("potentialCols") or game.get("cols") or [])
        self.rng.shuffle(pool)
        return Categories(rows=list(game["rows"]), cols=pool[:3])

    def random_scenario(self) -> Categories:
        """Curated mode. Falls back to free mode when no scenario exists."""
        if not self.scenarios:
            return self.random_categories()
        scenario = self.rng.choice(self.scenarios)
        answers = {}
        for key, name in scenario.get("answers", {}).items():
            row_label, col_label = key.split("|", 1)
            answers[(row_label, col_label)] = name
        return Categories(rows=list(scenario["rows"]), cols=list(scenario["cols"]), answers=answers)

    # --- move support ---

    def is_correct(self, categories: Categories, row: int, col: int, answer: str) -> bool:
        row_label, col_label = categories.rows[row], categories.cols[col]
        if categories.curated:
            return answer == categories.fixed_answer(row_label, col_label)
        return self.is_valid(answer, row_label, col_label)

    def correct_answer(self, categories: Categories, row: int, col: int,
                       used: Set[str]) -> Optional[str]:
        row_label, col_label = categories.rows[row], categories.cols[col]
        if categories.curated:
            return categories.fixed_answer(row_label, col_label)
        valid = sorted(self.valid_answers(row_label, col_label))
        if not valid:
            return None
        unused = [name for name in valid if name not in used]
        return self.rng.choice(unused or valid)

    def options(self, categories: Categories, row: int, col: int, used: Set[str]) -> List[Dict]:
        """The correct answer plus decoys, shuffled, each flagged used/unused."""
        correct = self.correct_answer(categories, row, col, used)
        if not correct:
            return []
        row_label, col_label = categories.rows[row], categories.cols[col]
        valid = self.valid_answers(row_label, col_label)
        decoy_pool = sorted(
            name for name in self._teams
            if name != correct and name not in valid
        )
        decoys = self.rng.sample(decoy_pool, min(DECOY_COUNT, len(decoy_pool)))
        names = [correct] + decoys
        self.rng.shuffle(names)
        return [{"name": name, "isUsed": name in used} for name in names]


_oracle: Optional[TriviaOracle] = None


def init_oracle(data_dir: str) -> TriviaOracle:
    global _oracle
    _oracle = TriviaOracle.from_directory(data_dir)
    return _oracle


def set_oracle(oracle: TriviaOracle):
    global _oracle
    _oracle = oracle


def get_oracle() -> TriviaOracle:
    global _oracle
    if _oracle is None:
        from config import Config
        _oracle = TriviaOracle.from_directory(Config.DATA_DIR)
    return _oracle
