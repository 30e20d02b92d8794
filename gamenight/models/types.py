# gamenight/models/types.py
from typing_extensions import TypedDict, Literal
from typing import Any, Dict, List, Optional

Side = Literal["away", "home"]
GameStatus = Literal["off", "today", "tomorrow", "live"]
ChallengeState = Literal["pending", "started", "finished"]


class TeamSummary(TypedDict):
    id: Optional[str]
    name: Optional[str]
    abbreviation: Optional[str]
    logo_url: Optional[str]
    record: str
    city: Optional[str]


class Signals(TypedDict):
    playoffImpact: Literal["High", "Medium", "Low"]
    starMatchup: None
    rivalry: None


class Game(TypedDict):
    id: Optional[str]
    gameDate: Optional[str]
    startTime: Optional[str]
    network: Optional[str]
    status: str
    homeScore: Optional[int]
    awayScore: Optional[int]
    homeTeam: TeamSummary
    awayTeam: TeamSummary
    score: int
    whyWatch: str
    signals: Signals
    betting: None


class Pick(TypedDict):
    id: Optional[str]
    date: Optional[str]
    score: int
    whyWatch: str
    source: str
    game: Game


class RosterEntry(TypedDict):
    id: Optional[str]
    name: Optional[str]
    firstName: Optional[str]
    lastName: Optional[str]
    position: Optional[str]
    jersey: Optional[str]
    headshot: Optional[str]
    status: str
    injuryType: Optional[str]
    experience: Optional[int]
    age: Optional[int]
    height: Optional[str]
    weight: Optional[str]
    college: Optional[str]
    isStarter: bool


class RankedStat(TypedDict):
    name: Optional[str]
    shortName: Optional[str]
    value: str
    rank: int
    category: Optional[str]


class TeamRankings(TypedDict):
    strengths: List[RankedStat]
    weaknesses: List[RankedStat]
    all: List[RankedStat]


class CompletedGame(TypedDict):
    date: Optional[str]
    opponent: Optional[str]
    opponentLogo: Optional[str]
    score: str
    won: Optional[bool]
    isHome: bool


class LiveScoreLine(TypedDict):
    team: Optional[str]
    score: Optional[int]
    isHome: bool


class Injury(TypedDict):
    name: Optional[str]
    position: Optional[str]
    status: str
    type: Optional[str]


class NextGame(TypedDict):
    opponent: Optional[str]
    date: Optional[str]
    isHome: bool


class TeamDetail(TypedDict, total=False):
    id: Optional[str]
    name: Optional[str]
    nickname: Optional[str]
    abbreviation: Optional[str]
    logo_url: Optional[str]
    color: Optional[str]
    alternateColor: Optional[str]
    record: str
    standing: str
    venue: Optional[str]
    location: Optional[str]
    ppg: str
    oppg: str
    pace: Optional[float]
    wins: int
    losses: int
    streak: Optional[float]
    lastTen: Optional[str]
    lastFiveGames: List[CompletedGame]
    rankings: TeamRankings
    rankingsSource: Literal["statistics", "averages"]
    gameStatus: GameStatus
    liveScore: Optional[List[LiveScoreLine]]
    nextGame: Optional[NextGame]
    todayGame: Optional[Dict[str, Any]]
    probableStarter: Optional[Dict[str, Any]]
    roster: List[RosterEntry]
    rosterError: Optional[str]
    injuries: List[Injury]
    lastUpdated: str


class RecentGame(TypedDict):
    date: Optional[str]
    opponent: Optional[str]
    result: Optional[str]
    stats: Any


class PlayerDetail(TypedDict, total=False):
    id: Optional[str]
    name: Optional[str]
    firstName: Optional[str]
    lastName: Optional[str]
    position: Optional[str]
    jersey: Optional[str]
    headshot: Optional[str]
    team: Dict[str, Optional[str]]
    age: Optional[int]
    height: Optional[str]
    weight: Optional[str]
    birthDate: Optional[str]
    birthPlace: Optional[str]
    college: Optional[str]
    experience: Optional[int]
    draft: Optional[str]
    status: str
    injuryType: Optional[str]
    injuryDetails: Optional[str]
    stats: Dict[str, Any]
    recentGames: List[RecentGame]
    lastUpdated: str


class ChallengeOption(TypedDict):
    value: Side
    label: Optional[str]


class Challenge(TypedDict):
    id: str
    date: Optional[str]
    question: str
    state: ChallengeState
    gameStarted: bool
    gameFinished: bool
    winner: Optional[Side]
    homeScore: Optional[int]
    awayScore: Optional[int]
    game: Dict[str, Any]
    options: List[ChallengeOption]


class VoteResult(TypedDict, total=False):
    success: bool
    prediction: Side
    error: str


class UserStats(TypedDict):
    points: int
    streak: int
    accuracy: float


class Settings(TypedDict):
    bettingSignals: bool
    notifications: bool
    emailAlerts: bool
    premium: bool
