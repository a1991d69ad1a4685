"""Assembles a tournament-provider panel from layout settings."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, MutableMapping
from enum import Enum

from .challonge import ChallongeWidget
from .challonge import Sender as _ChallongeSender
from .provider import Field, ProviderWidget
from .smashgg import SmashggWidget


class Provider(Enum):
    """The online bracket services a panel can be built for."""

    SMASHGG = "smashgg"
    CHALLONGE = "challonge"


class ProviderWidgetBuilder:
    """Collects the scoreboard fields a provider panel fills, then builds it."""

    def __init__(
        self,
        widget_list: MutableMapping[str, Field],
        settings: Mapping[str, str],
        sender: _ChallongeSender | None = None,
    ) -> None:
        self.widget_list = widget_list
        self.settings = settings
        self.sender = sender
        self.player_one_widget = ""
        self.player_two_widget = ""
        self.player_one_country_widget = ""
        self.player_two_country_widget = ""
        self.tournament_stage_widget = ""
        self.bracket_stage_widget = ""
        self.clear_widgets: list[str] = []
        self.output_file_name = ""
        # Bracket slot name -> field id groups, in the order they were added.
        self._match_widgets: dict[str, list[list[str]]] = {}

    def set_player_name_widgets(self, player_one_widget: str, player_two_widget: str) -> None:
        """Name the fields that receive the two players' names."""
        self.player_one_widget = player_one_widget
        self.player_two_widget = player_two_widget

    def set_player_country_widgets(
        self, player_one_country_widget: str, player_two_country_widget: str
    ) -> None:
        """Name the fields that receive the two players' countries."""
        self.player_one_country_widget = player_one_country_widget
        self.player_two_country_widget = player_two_country_widget

    def set_tournament_stage_widget(self, widget_id: str) -> None:
        """Name the field that receives the round name."""
        self.tournament_stage_widget = widget_id

    def set_bracket_stage_widget(self, widget_id: str) -> None:
        """Name the field that receives the bracket (tournament) name or URL."""
        self.bracket_stage_widget = widget_id

    def set_clear_widgets(self, widget_ids: Iterable[str]) -> None:
        """Name the fields reset whenever a new match is applied."""
        self.clear_widgets = list(widget_ids)

    def set_output_file_name(self, file_name: str) -> None:
        """Name the file that bracket data is written to."""
        self.output_file_name = file_name

    def add_match_widget(
        self,
        tournament_stage: str,
        player_one_name_widget: str,
        player_one_score_widget: str,
        player_two_name_widget: str,
        player_two_score_widget: str,
    ) -> None:
        """Bind four fields to a bracket slot; a slot may be added several times."""
        self._match_widgets.setdefault(tournament_stage, []).append(
            [
                player_one_name_widget,
                player_one_score_widget,
                player_two_name_widget,
                player_two_score_widget,
            ]
        )

    def bracket_widgets(self) -> dict[str, list[str]]:
        """Field ids per bracket slot.

        A slot added more than once is numbered from 1 in the order added,
        e.g. ``top8Losers1`` and ``top8Losers2``.
        """
        result: dict[str, list[str]] = {}
        for stage in sorted(self._match_widgets):
            groups = self._match_widgets[stage]
            if len(groups) == 1:
                result[stage] = list(groups[0])
            else:
                for number, ids in enumerate(groups, start=1):
                    result[f"{stage}{number}"] = list(ids)
        return result

    def build(self, provider: Provider) -> ProviderWidget:
        """Create the panel for *provider* with everything configured so far."""
        if provider is Provider.CHALLONGE:
            widget_class = ChallongeWidget
        elif provider is Provider.SMASHGG:
            widget_class = SmashggWidget
        else:
            raise ValueError(f"unknown provider: {provider!r}")
        return widget_class(
            self.widget_list,
            self.settings,
            self.player_one_widget,
            self.player_two_widget,
            self.player_one_country_widget,
            self.player_two_country_widget,
            self.tournament_stage_widget,
            self.bracket_stage_widget,
            self.output_file_name,
            self.bracket_widgets(),
            self.clear_widgets,
            sender=self.sender,
        )