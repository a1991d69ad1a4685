"""Tournament panel backed by the Challonge REST API."""

from __future__ import annotations

import base64
import json
import urllib.error
import urllib.request
from collections.abc import Callable, Iterable, Mapping, MutableMapping, Sequence
from typing import Any

from .provider import CUSTOM_DATA, CUSTOM_TEXT, Field, ProviderWidget, TournamentTreeNode
from .rounds import TournamentType, get_phase, match_by_id, matches_for_round, winners_rounds

API_ROOT = "https://api.challonge.com/v1"

LIST_ERROR_TEXT = "Error loading tournament list:\n{}"
DATA_ERROR_TEXT = "Error loading tournament data:\n{}"
NO_TOURNAMENTS_TEXT = "There are no tournaments currently in progress."

Sender = Callable[[urllib.request.Request], "tuple[bytes, bool]"]

# Top 16 of a double elimination bracket. Prerequisites that lead from the
# losers side back into the winners side are left empty: those matches are
# already reached through the winners side.
_DOUBLE_ELIM_NODES: dict[str, TournamentTreeNode] = {
    "grandFinal": TournamentTreeNode("winnersFinal", "losersFinal"),
    "winnersFinal": TournamentTreeNode("winnersSemiFinal1", "winnersSemiFinal2"),
    "winnersSemiFinal1": TournamentTreeNode("winnersQuarterFinal1", "winnersQuarterFinal2"),
    "winnersSemiFinal2": TournamentTreeNode("winnersQuarterFinal3", "winnersQuarterFinal4"),
    "winnersQuarterFinal1": TournamentTreeNode(),
    "winnersQuarterFinal2": TournamentTreeNode(),
    "winnersQuarterFinal3": TournamentTreeNode(),
    "winnersQuarterFinal4": TournamentTreeNode(),
    "losersFinal": TournamentTreeNode("", "losersSemiFinal"),
    "losersSemiFinal": TournamentTreeNode("top6Losers1", "top6Losers2"),
    "top6Losers1": TournamentTreeNode("", "top8Losers1"),
    "top6Losers2": TournamentTreeNode("", "top8Losers2"),
    "top8Losers1": TournamentTreeNode("top12Losers1", "top12Losers2"),
    "top8Losers2": TournamentTreeNode("top12Losers3", "top12Losers4"),
    "top12Losers1": TournamentTreeNode("", "top16Losers1"),
    "top12Losers2": TournamentTreeNode("", "top16Losers2"),
    "top12Losers3": TournamentTreeNode("", "top16Losers3"),
    "top12Losers4": TournamentTreeNode("", "top16Losers4"),
    "top16Losers1": TournamentTreeNode(),
    "top16Losers2": TournamentTreeNode(),
    "top16Losers3": TournamentTreeNode(),
    "top16Losers4": TournamentTreeNode(),
}


def _send_with_urllib(request: urllib.request.Request) -> tuple[bytes, bool]:
    try:
        with urllib.request.urlopen(request, timeout=30) as response:
            return response.read(), False
    except urllib.error.HTTPError as error:
        return error.read(), True
    except urllib.error.URLError as error:
        return str(error.reason).encode("utf-8"), True


def _text(body: str | bytes) -> str:
    return body.decode("utf-8", "replace") if isinstance(body, bytes) else body


def _parse_document(text: str) -> dict[str, Any] | list[Any] | None:
    try:
        document = json.loads(text)
    except ValueError:
        return None
    return document if isinstance(document, (dict, list)) else None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []


def _json_str(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _json_int(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return 0


def _error_lines(document: Any) -> str:
    errors = _as_list(_as_dict(document).get("errors"))
    return "\n".join(_json_str(error) for error in errors)


class ChallongeWidget(ProviderWidget):
    """Loads tournaments and open matches from Challonge."""

    def __init__(
        self,
        widget_list: MutableMapping[str, Field],
        settings: Mapping[str, str],
        player_one_widget_id: str = "",
        player_two_widget_id: str = "",
        player_one_country_widget_id: str = "",
        player_two_country_widget_id: str = "",
        tournament_stage_widget_id: str = "",
        bracket_widget_id: str = "",
        output_file_name: str = "",
        bracket_widgets: Mapping[str, Sequence[str]] | None = None,
        clear_widgets: Iterable[str] = (),
        sender: Sender | None = None,
    ) -> None:
        self.player_id_map: dict[int, str] = {}
        self.sender: Sender = sender or _send_with_urllib
        super().__init__(
            widget_list,
            settings,
            player_one_widget_id,
            player_two_widget_id,
            player_one_country_widget_id,
            player_two_country_widget_id,
            tournament_stage_widget_id,
            bracket_widget_id,
            output_file_name,
            bracket_widgets,
            clear_widgets,
            custom_label_text="or Tournament ID:",
        )

    def auth_header(self) -> str:
        """The HTTP Basic authorization value built from the user name and API key."""
        credentials = (
            self.settings.get("challonge>username", "")
            + ":"
            + self.settings.get("challonge>apiKey", "")
        )
        return "Basic " + base64.b64encode(credentials.encode("utf-8")).decode("ascii")

    def fetch_tournaments(self) -> None:
        """Request the tournaments that are in progress."""
        url = f"{API_ROOT}/tournaments.json?state=in_progress"
        organization = self.settings.get("challonge>organization", "")
        if organization:
            url += f"&subdomain={organization}"
        body, failed = self._get(url)
        self.process_tournament_list_json(body, failed)

    def fetch_matches(self) -> None:
        """Request the matches and participants of the selected tournament."""
        tournament_id = self.selected_tournament_id()
        url = (
            f"{API_ROOT}/tournaments/{tournament_id}.json"
            "?include_matches=1&include_participants=1"
        )
        body, failed = self._get(url)
        self.process_tournament_json(body, failed)

    def process_tournament_list_json(self, body: str | bytes, failed: bool) -> None:
        """Fill the tournament list from a response, or show its errors."""
        self.status_text = ""
        text = _text(body)
        document = _parse_document(text)

        if failed:
            if not document:
                self.status_text = LIST_ERROR_TEXT.format(text)
            else:
                self.status_text = LIST_ERROR_TEXT.format(_error_lines(document))
            return

        self.tournaments_box.clear()
        self.matches_box.clear()

        tournaments = _as_list(document)
        if not tournaments:
            self.status_text = LIST_ERROR_TEXT.format(NO_TOURNAMENTS_TEXT)
        for record in tournaments:
            tournament = _as_dict(_as_dict(record).get("tournament"))
            self.tournaments_box.add_item(
                _json_str(tournament.get("name")), str(_json_int(tournament.get("id")))
            )
        self.tournaments_box.add_item(CUSTOM_TEXT, CUSTOM_DATA)
        self.update_custom_id_box_state()

    def process_tournament_json(self, body: str | bytes, failed: bool) -> None:
        """Load a tournament and list its open matches, or show its errors."""
        self.status_text = ""
        text = _text(body)

        if failed:
            self.status_text = DATA_ERROR_TEXT.format(_error_lines(_parse_document(text)))
            return

        self.current_tournament_json = _parse_document(text)
        tournament = self._tournament()
        name = _json_str(tournament.get("name"))
        self.current_tournament_text = f"Current Tournament: {name}"

        self.matches_box.clear()
        self.player_id_map = {}
        for record in _as_list(tournament.get("participants")):
            participant = _as_dict(_as_dict(record).get("participant"))
            self.player_id_map[_json_int(participant.get("id"))] = _json_str(
                participant.get("name")
            )

        for record in _as_list(tournament.get("matches")):
            match = _as_dict(_as_dict(record).get("match"))
            if _json_str(match.get("state")) != "open":
                continue
            player_one = self.player_id_map.get(_json_int(match.get("player1_id")), "")
            player_two = self.player_id_map.get(_json_int(match.get("player2_id")), "")
            details = (
                _json_str(tournament.get("tournament_type")),
                _json_int(tournament.get("participants_count")),
                _json_int(match.get("round")),
                player_one,
                player_two,
            )
            self.matches_box.add_item(f"{player_one} vs {player_two}", details)

    def set_match_data(self) -> None:
        """Fill the scoreboard with the selected match and its round name."""
        details = self.matches_box.current_data()
        if not details:
            return
        type_name, player_count, round_number, player_one, player_two = details
        phase = get_phase(TournamentType.from_name(type_name), round_number, player_count)
        self.fill_match_widgets(
            player_one, player_two, phase, _json_str(self._tournament().get("url"))
        )

    def set_bracket_data(self) -> None:
        """Write the bracket file if one is configured, else fill the bracket fields."""
        if not self.write_bracket_to_file():
            self._fill_bracket_widgets()

    # -- helpers ---------------------------------------------------------------

    def _get(self, url: str) -> tuple[bytes, bool]:
        request = urllib.request.Request(url, headers={"Authorization": self.auth_header()})
        return self.sender(request)

    def _tournament(self) -> dict[str, Any]:
        return _as_dict(_as_dict(self.current_tournament_json).get("tournament"))

    def _fill_bracket_widgets(self) -> None:
        self.clear_bracket_widgets()

        tournament = self._tournament()
        participants = _as_list(tournament.get("participants"))
        matches = _as_list(tournament.get("matches"))

        # The grand final is the round after the winners final; a reset follows it.
        grand_final_round = winners_rounds(len(participants)) + 1
        grand_finals = matches_for_round(matches, grand_final_round)

        if len(grand_finals) == 2:
            self._fill_bracket_with_match("grandFinalReset", grand_finals[-1])

        grand_final = grand_finals[0] if grand_finals else {}
        self._fill_widget(matches, "grandFinal", grand_final)

    def _fill_bracket_with_match(self, match_id: str, match: Mapping[str, Any]) -> None:
        player_one = self.player_id_map.get(_json_int(match.get("player1_id")), "")
        player_two = self.player_id_map.get(_json_int(match.get("player2_id")), "")
        score_one = score_two = ""
        scores = _json_str(match.get("scores_csv")).split("-")
        if len(scores) == 2:
            score_one, score_two = scores
        self.fill_bracket_match_widget(match_id, player_one, player_two, score_one, score_two)

    def _fill_widget(self, matches: list[Any], match_id: str, match: Mapping[str, Any]) -> None:
        self._fill_bracket_with_match(match_id, match)
        node = _DOUBLE_ELIM_NODES.get(match_id, TournamentTreeNode())
        for child_id, prereq_key in (
            (node.child1_id, "player1_prereq_match_id"),
            (node.child2_id, "player2_prereq_match_id"),
        ):
            if child_id:
                previous = str(_json_int(match.get(prereq_key)))
                self._fill_widget(matches, child_id, match_by_id(matches, previous))