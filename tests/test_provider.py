import json

import pytest

from streamdeckctl.provider import (
    CheckField,
    ChoiceBox,
    LineField,
    ProviderWidget,
    SpinField,
    TournamentTreeNode,
)


class _RecordingProvider(ProviderWidget):
    def __init__(self, *args, **kwargs):
        self.calls = []
        super().__init__(*args, **kwargs)

    def fetch_tournaments(self):
        self.calls.append("fetch_tournaments")

    def fetch_matches(self):
        self.calls.append("fetch_matches")

    def process_tournament_list_json(self, body, failed):
        self.calls.append(("list", body, failed))

    def process_tournament_json(self, body, failed):
        self.calls.append(("tournament", body, failed))

    def set_match_data(self):
        self.calls.append(("match", self.matches_box.current_data()))

    def set_bracket_data(self):
        self.calls.append("bracket")


@pytest.fixture
def widgets():
    return {
        "p1": LineField(),
        "p2": LineField(),
        "c1": LineField(),
        "c2": LineField(),
        "stage": LineField(),
        "bracket": LineField(),
        "score1": SpinField(value=3),
        "note": LineField(text="old"),
        "flag": CheckField(checked=True),
        "gf_p1": LineField(text="a"),
        "gf_s1": LineField(text="b"),
        "gf_p2": LineField(text="c"),
        "gf_s2": LineField(text="d"),
    }


def _make(widgets, settings=None, **kwargs):
    defaults = dict(
        player_one_widget_id="p1",
        player_two_widget_id="p2",
        player_one_country_widget_id="c1",
        player_two_country_widget_id="c2",
        tournament_stage_widget_id="stage",
        bracket_widget_id="bracket",
        bracket_widgets={"grandFinal": ["gf_p1", "gf_s1", "gf_p2", "gf_s2"]},
        clear_widgets=["score1", "note", "flag"],
        custom_label_text="or Tournament ID:",
    )
    defaults.update(kwargs)
    return _RecordingProvider(widgets, settings or {}, **defaults)


def test_base_class_is_abstract(widgets):
    with pytest.raises(TypeError):
        ProviderWidget(widgets, {})


def test_tree_node_defaults():
    node = TournamentTreeNode("winnersFinal", "losersFinal")
    assert (node.child1_id, node.child2_id) == ("winnersFinal", "losersFinal")
    assert TournamentTreeNode() == TournamentTreeNode("", "")


def test_initial_state(widgets):
    panel = _make(widgets)
    assert panel.tournaments_box.items == [("Custom...", "custom")]
    assert panel.tournaments_box.is_last_selected()
    assert panel.current_tournament_text == "Current Tournament: (none)"
    assert panel.tournament_custom_field.enabled is True
    assert panel.show_bracket_button is True


def test_bracket_button_hidden_without_targets(widgets):
    panel = _make(widgets, bracket_widgets={}, output_file_name="")
    assert panel.show_bracket_button is False


def test_choice_box_basics():
    box = ChoiceBox()
    assert box.current_data() is None
    assert box.current_index == -1
    box.add_item("one", 1)
    box.add_item("two", 2)
    assert box.current_text == "one"
    box.current_index = 1
    assert box.current_data() == 2
    assert len(box) == 2
    with pytest.raises(IndexError):
        box.current_index = 5
    box.clear()
    assert box.current_index == -1
    assert box.current_data() is None


def test_clear_bracket_widgets(widgets):
    panel = _make(widgets)
    panel.clear_bracket_widgets()
    assert [widgets[k].text for k in ("gf_p1", "gf_s1", "gf_p2", "gf_s2")] == ["", "", "", ""]


def test_fill_bracket_match_widget_order(widgets):
    panel = _make(widgets)
    panel.fill_bracket_match_widget("grandFinal", "Alice", "Bob", "3", "1")
    assert widgets["gf_p1"].text == "Alice"
    assert widgets["gf_s1"].text == "3"
    assert widgets["gf_p2"].text == "Bob"
    assert widgets["gf_s2"].text == "1"


def test_fill_bracket_unknown_slot_changes_nothing(widgets):
    panel = _make(widgets)
    panel.fill_bracket_match_widget("losersFinal", "Alice", "Bob", "3", "1")
    assert widgets["gf_p1"].text == "a"
    assert widgets["gf_s2"].text == "d"


def test_fill_bracket_non_text_target_raises(widgets):
    panel = _make(widgets, bracket_widgets={"x": ["score1", "note", "p1", "p2"]})
    with pytest.raises(TypeError):
        panel.fill_bracket_match_widget("x", "A", "B", "1", "2")


def test_write_bracket_without_file_name(widgets, tmp_path):
    panel = _make(widgets, settings={"outputPath": str(tmp_path) + "/"})
    assert panel.write_bracket_to_file() is False
    assert list(tmp_path.iterdir()) == []


def test_write_bracket_round_trip(widgets, tmp_path):
    panel = _make(
        widgets,
        settings={"outputPath": str(tmp_path) + "/"},
        output_file_name="bracket.json",
    )
    document = {"tournament": {"name": "Weekly", "matches": [1, 2]}}
    panel.current_tournament_json = document
    assert panel.write_bracket_to_file() is True
    written = (tmp_path / "bracket.json").read_text(encoding="utf-8")
    assert json.loads(written) == document


def test_fill_match_widgets(widgets):
    panel = _make(widgets)
    panel.fill_match_widgets("Alice", "Bob", "Winners Finals", "weekly42")
    assert widgets["score1"].value == 0
    assert widgets["note"].text == ""
    assert widgets["flag"].checked is False
    assert widgets["p1"].text == "Alice"
    assert widgets["p2"].text == "Bob"
    assert widgets["stage"].text == "Winners Finals"
    assert widgets["bracket"].text == "weekly42"


def test_fill_match_widgets_missing_player_field(widgets):
    del widgets["p2"]
    panel = _make(widgets)
    panel.fill_match_widgets("Alice", "Bob", "Semis", "b")
    assert widgets["p1"].text == ""
    assert widgets["stage"].text == "Semis"


def test_fill_match_widgets_runs_completions(widgets):
    completed = []
    widgets["p1"] = LineField(completions=["Alice", "Carol"], on_completion=completed.append)
    panel = _make(widgets)
    panel.fill_match_widgets("Alice", "Bob", "", "")
    assert completed == ["Alice"]


def test_fill_additional_match_widgets(widgets):
    panel = _make(widgets)
    panel.fill_additional_match_widgets("JP", "US")
    assert (widgets["c1"].text, widgets["c2"].text) == ("JP", "US")


def test_fill_additional_needs_both_fields(widgets):
    del widgets["c2"]
    panel = _make(widgets)
    panel.fill_additional_match_widgets("JP", "US")
    assert widgets["c1"].text == ""


def test_auto_mode_applies_selected_match(widgets):
    panel = _make(widgets)
    panel.matches_box.add_item("A vs B", ["first"])
    panel.matches_box.add_item("C vs D", ["second"])
    assert panel.calls == []

    panel.toggle_auto_mode(True)
    panel.select_match(1)
    assert panel.calls == [("match", ["second"])]

    panel.toggle_auto_mode(False)
    panel.select_match(0)
    assert panel.calls == [("match", ["second"])]
    assert panel.matches_box.current_data() == ["first"]