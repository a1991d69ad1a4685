"""Tournament panel backed by the smash.gg GraphQL API."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from collections.abc import Callable, Iterable, Mapping, MutableMapping, Sequence
from typing import Any

from .provider import CUSTOM_DATA, CUSTOM_TEXT, Field, ProviderWidget

API_URL = "https://api.smash.gg/gql/alpha"

LIST_ERROR_TEXT = "Error loading tournament list:\n{}"
DATA_ERROR_TEXT = "Error loading tournament data:\n{}"
NO_TOURNAMENTS_TEXT = "No tournaments found with this owner."

TOURNAMENTS_PER_PAGE = 10

TOURNAMENTS_QUERY = """query TournamentsByOwner($ownerId: ID, $perPage: Int) {
    tournaments(query: {
        perPage: $perPage
        filter: {
            ownerId: $ownerId
        }
        sort: startAt
    }) {
        nodes {
            slug
            name
        }
    }
}"""

STREAM_QUEUE_QUERY = """query StreamQueue($tourneySlug: String!) {
    tournament(slug: $tourneySlug) {
        name
        streamQueue {
            stream {
                streamName
            }
            sets {
                id
                fullRoundText
                slots {
                    entrant {
                        name
                        participants {
                            player {
                                gamerTag
                                prefix
                                user {
                                    location {
                                        country
                                    }
                                }
                            }
                        }
                    }
                }
            }
        }
    }
}"""

Sender = Callable[[urllib.request.Request], "tuple[bytes, bool]"]


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


def _error_lines(document: Any) -> str:
    errors = _as_list(_as_dict(document).get("errors"))
    return "\n".join(_json_str(error) for error in errors)


def _round_name(full_round_text: str) -> str:
    return full_round_text.replace("-Final", "s").replace(" Final", " Finals")


def _slot_entrant(slots: list[Any], index: int) -> dict[str, Any]:
    if index >= len(slots):
        return {}
    return _as_dict(_as_dict(slots[index]).get("entrant"))


class SmashggWidget(ProviderWidget):
    """Loads an owner's tournaments and the sets on a tournament's stream queue."""

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
            custom_label_text="or Tournament Slug:",
        )

    def auth_header(self) -> str:
        """The bearer authorization value built from the configured token."""
        return "Bearer " + self.settings.get("smashgg>authenticationToken", "")

    def build_request(self, query: str, variables: Mapping[str, Any]) -> urllib.request.Request:
        """Build a POST request carrying *query* and *variables* as compact JSON."""
        payload = {"query": query, "variables": dict(variables)}
        data = json.dumps(
            payload, separators=(",", ":"), sort_keys=True, ensure_ascii=False
        ).encode("utf-8")
        return urllib.request.Request(
            API_URL,
            data=data,
            headers={
                "Authorization": self.auth_header(),
                "Content-Type": "application/json",
            },
            method="POST",
        )

    def fetch_tournaments(self) -> None:
        """Request the tournaments of the configured owner."""
        variables = {
            "ownerId": self.settings.get("smashgg>ownerId", ""),
            "perPage": TOURNAMENTS_PER_PAGE,
        }
        body, failed = self.sender(self.build_request(TOURNAMENTS_QUERY, variables))
        self.process_tournament_list_json(body, failed)

    def fetch_matches(self) -> None:
        """Request the stream queue of the selected tournament."""
        variables = {"tourneySlug": self.selected_tournament_id()}
        body, failed = self.sender(self.build_request(STREAM_QUEUE_QUERY, variables))
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

        data = _as_dict(_as_dict(document).get("data"))
        nodes = _as_list(_as_dict(data.get("tournaments")).get("nodes"))
        if not nodes:
            self.status_text = LIST_ERROR_TEXT.format(NO_TOURNAMENTS_TEXT)
        for node in nodes:
            tournament = _as_dict(node)
            self.tournaments_box.add_item(
                _json_str(tournament.get("name")), _json_str(tournament.get("slug"))
            )
        self.tournaments_box.add_item(CUSTOM_TEXT, CUSTOM_DATA)
        self.update_custom_id_box_state()

    def process_tournament_json(self, body: str | bytes, failed: bool) -> None:
        """List the sets on the tournament's stream queue, or show its errors."""
        self.status_text = ""
        text = _text(body)

        if failed:
            self.status_text = DATA_ERROR_TEXT.format(_error_lines(_parse_document(text)))
            return

        document = _as_dict(_parse_document(text))
        tournament = _as_dict(_as_dict(document.get("data")).get("tournament"))
        tournament_name = _json_str(tournament.get("name"))
        self.current_tournament_text = f"Current Tournament: {tournament_name}"

        self.matches_box.clear()
        wanted_stream = self.settings.get("smashgg>streamName", "")

        for queue_record in _as_list(tournament.get("streamQueue")):
            queue = _as_dict(queue_record)
            stream_name = _json_str(_as_dict(queue.get("stream")).get("streamName"))
            if wanted_stream and wanted_stream.casefold() != stream_name.casefold():
                continue
            for set_record in _as_list(queue.get("sets")):
                self._add_set(_as_dict(set_record), tournament_name)

    def set_match_data(self) -> None:
        """Fill the scoreboard with the selected set and, if known, both countries."""
        details = self.matches_box.current_data()
        if not details:
            return
        _kind, tournament_name, round_name, one, two, country_one, country_two = details
        self.fill_match_widgets(one, two, round_name, tournament_name)
        if country_one and country_two:
            self.fill_additional_match_widgets(country_one, country_two)

    def set_bracket_data(self) -> None:
        """Bracket data is not offered by this provider, so nothing is changed."""

    # -- helpers ---------------------------------------------------------------

    def _add_set(self, match_set: dict[str, Any], tournament_name: str) -> None:
        slots = _as_list(match_set.get("slots"))
        entrant_one = _slot_entrant(slots, 0)
        entrant_two = _slot_entrant(slots, 1)
        if not entrant_one or not entrant_two:
            return

        name_one = _json_str(entrant_one.get("name"))
        name_two = _json_str(entrant_two.get("name"))
        country_one = country_two = ""
        round_name = _round_name(_json_str(match_set.get("fullRoundText")))

        members_one = _as_list(entrant_one.get("participants"))
        members_two = _as_list(entrant_two.get("participants"))
        if len(members_one) == 1 and len(members_two) == 1:
            player_one = _as_dict(_as_dict(members_one[0]).get("player"))
            player_two = _as_dict(_as_dict(members_two[0]).get("player"))
            name_one = _json_str(player_one.get("gamerTag"))
            name_two = _json_str(player_two.get("gamerTag"))
            country_one = self._country(player_one)
            country_two = self._country(player_two)

        details = (
            "double elimination",
            tournament_name,
            round_name,
            name_one,
            name_two,
            country_one,
            country_two,
        )
        self.matches_box.add_item(f"{round_name} - {name_one} vs {name_two}", details)

    @staticmethod
    def _country(player: dict[str, Any]) -> str:
        location = _as_dict(_as_dict(player.get("user")).get("location"))
        return _json_str(location.get("country"))