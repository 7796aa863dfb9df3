from __future__ import annotations

import json
import unittest
from datetime import date

from ybsports.schedule.errors import ConfigError, ParseError
from ybsports.schedule.extractors import (
    DomSelectorExtractor,
    JsonPayloadExtractor,
    TextPatternExtractor,
    get_extractor,
    map_status_code,
)
from ybsports.schedule.teams import split_team_names


class TextPatternExtractorTests(unittest.TestCase):
    def test_extracts_example_line(self) -> None:
        games = TextPatternExtractor().extract("2025/10/31 Hanwha Eagles LG Twins 1 4")

        self.assertEqual(1, len(games))
        game = games[0]
        self.assertEqual(date(2025, 10, 31), game.date)
        self.assertEqual("Hanwha Eagles", game.team1)
        self.assertEqual("LG Twins", game.team2)
        self.assertEqual(1, game.score1)
        self.assertEqual(4, game.score2)
        self.assertEqual("finished", game.status_code)

    def test_skips_non_matching_lines_without_failing(self) -> None:
        raw = "\n".join(
            [
                "KBO Korean Series",
                "2025/10/30 LG Twins Hanwha Eagles 5 x",
                "2025/10/30 Hanwha 3 2",
                "   ",
                "2025/10/31 한화 LG 1 4",
                "2025/13/01 Doosan Bears Kia Tigers 2 2",
            ]
        )

        games = TextPatternExtractor().extract(raw)

        self.assertEqual(1, len(games))
        self.assertEqual(("한화", "LG"), (games[0].team1, games[0].team2))

    def test_reads_rendered_html_text(self) -> None:
        html = (
            "<html><body><h1>Schedule</h1>"
            "<p>2025/10/29 Samsung Lions SSG Landers 3 7</p>"
            "<p>Rain delay notice</p>"
            "<p> 2025/10/30 Unknown Club Other Club 0 2 </p>"
            "</body></html>"
        )

        games = TextPatternExtractor().extract(html)

        self.assertEqual(2, len(games))
        self.assertEqual("Samsung Lions", games[0].team1)
        self.assertEqual("SSG Landers", games[0].team2)
        self.assertEqual(("Unknown Club", "Other Club"), (games[1].team1, games[1].team2))


class TeamSplitTests(unittest.TestCase):
    def test_prefers_known_team_prefix(self) -> None:
        self.assertEqual(("KT Wiz", "NC Dinos"), split_team_names("KT Wiz NC Dinos"))

    def test_uses_wide_gap_when_names_unknown(self) -> None:
        self.assertEqual(("Red Sox B", "Mets"), split_team_names("Red Sox B   Mets"))

    def test_single_token_cannot_be_split(self) -> None:
        self.assertIsNone(split_team_names("Hanwha"))


class JsonPayloadExtractorTests(unittest.TestCase):
    def _payload(self) -> str:
        return json.dumps(
            {
                "games": [
                    {
                        "gameDate": "2025-10-31",
                        "gameDateTime": "2025-10-31T18:30:00",
                        "homeTeamName": "LG",
                        "awayTeamName": "한화",
                        "homeTeamScore": 4,
                        "awayTeamScore": 1,
                        "statusCode": "RESULT",
                    },
                    {
                        "date": "20251101",
                        "homeTeam": {"name": "KT", "score": None},
                        "awayTeam": {"name": "NC"},
                        "time": "14:00",
                        "status": "BEFORE",
                    },
                    {
                        "gameDate": "2025-11-01",
                        "home": {"name": "SSG", "score": "2"},
                        "away": {"name": "Lotte", "score": "x"},
                        "gameStatus": "LIVE",
                    },
                    {"gameDate": "2025-11-01", "homeTeamName": "Doosan", "statusCode": "END"},
                    {"homeTeamName": "Samsung", "awayTeamName": "KIA", "statusCode": "CANCEL"},
                    "not-a-record",
                ]
            },
            ensure_ascii=False,
        )

    def test_reads_fields_with_fallback_names(self) -> None:
        games = JsonPayloadExtractor().extract(self._payload(), default_date=date(2025, 11, 2))

        self.assertEqual(4, len(games))

        finished, scheduled, live, defaulted = games
        self.assertEqual(("LG", "한화"), (finished.team1, finished.team2))
        self.assertEqual((4, 1), (finished.score1, finished.score2))
        self.assertEqual("18:30", finished.time)
        self.assertEqual("finished", finished.status_code)

        self.assertEqual(date(2025, 11, 1), scheduled.date)
        self.assertEqual(("KT", "NC"), (scheduled.team1, scheduled.team2))
        self.assertIsNone(scheduled.score1)
        self.assertEqual("14:00", scheduled.time)
        self.assertEqual("scheduled", scheduled.status_code)

        self.assertEqual(2, live.score1)
        self.assertIsNone(live.score2)
        self.assertEqual("live", live.status_code)

        self.assertEqual(date(2025, 11, 2), defaulted.date)
        self.assertEqual("scheduled", defaulted.status_code)

    def test_missing_games_array_yields_empty_list(self) -> None:
        self.assertEqual([], JsonPayloadExtractor().extract(json.dumps({"result": {}})))
        self.assertEqual([], JsonPayloadExtractor().extract(json.dumps([1, 2])))

    def test_reads_nested_result_games(self) -> None:
        raw = json.dumps(
            {"result": {"games": [{"gameDate": "2025-10-31", "homeTeamName": "A", "awayTeamName": "B"}]}}
        )

        games = JsonPayloadExtractor().extract(raw)

        self.assertEqual(1, len(games))

    def test_invalid_json_raises_parse_error(self) -> None:
        with self.assertRaises(ParseError):
            JsonPayloadExtractor().extract("<html>maintenance</html>")

    def test_status_code_mapping(self) -> None:
        self.assertEqual("scheduled", map_status_code("BEFORE"))
        self.assertEqual("finished", map_status_code("END"))
        self.assertEqual("finished", map_status_code("result"))
        self.assertEqual("live", map_status_code("LIVE"))
        self.assertEqual("scheduled", map_status_code("SUSPENDED"))
        self.assertEqual("scheduled", map_status_code(None))


class DomSelectorExtractorTests(unittest.TestCase):
    HTML = """
    <ul class="schedule">
      <li class="game_item" data-date="2025-10-31">
        <span class="game_time">18:30</span>
        <div class="team_home"><span class="team_name"> LG </span><span class="team_score">4</span></div>
        <div class="team_away"><span class="team_name">한화</span><span class="team_score">1</span></div>
      </li>
      <li class="game_item">
        <span class="game_time">14:00</span>
        <div class="team_home"><span class="team_name">KT</span></div>
        <div class="team_away"><span class="team_name">NC</span></div>
      </li>
      <li class="game_item">
        <div class="team_home"><span class="team_name">SSG</span></div>
      </li>
    </ul>
    """

    def test_extracts_items_and_skips_incomplete_ones(self) -> None:
        games = DomSelectorExtractor().extract(self.HTML, default_date=date(2025, 11, 1))

        self.assertEqual(2, len(games))
        finished, scheduled = games

        self.assertEqual(date(2025, 10, 31), finished.date)
        self.assertEqual(("LG", "한화"), (finished.team1, finished.team2))
        self.assertEqual((4, 1), (finished.score1, finished.score2))
        self.assertEqual("finished", finished.status_code)

        self.assertEqual(date(2025, 11, 1), scheduled.date)
        self.assertEqual("14:00", scheduled.time)
        self.assertIsNone(scheduled.score1)
        self.assertEqual("scheduled", scheduled.status_code)

    def test_items_without_any_date_are_skipped(self) -> None:
        games = DomSelectorExtractor().extract(self.HTML)

        self.assertEqual(1, len(games))


class ExtractorRegistryTests(unittest.TestCase):
    def test_get_extractor_by_source_type(self) -> None:
        self.assertIsInstance(get_extractor("text"), TextPatternExtractor)
        self.assertIsInstance(get_extractor("json"), JsonPayloadExtractor)
        self.assertIsInstance(get_extractor("dom"), DomSelectorExtractor)

    def test_unknown_source_type(self) -> None:
        with self.assertRaises(ConfigError):
            get_extractor("rss")


if __name__ == "__main__":
    unittest.main()
